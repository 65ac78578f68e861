# ──────────────────────────────────────────────────────────────────────
# TwinCosmos — IO Package Init
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""Memory log and logging configuration."""

from .logging_config import TwinJSONFormatter, setup_twin_logging
from .memory_store import MemoryEntry, MemoryStore, serialize_value
