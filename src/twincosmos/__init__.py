# ──────────────────────────────────────────────────────────────────────
# TwinCosmos — Package Init
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""Toy fusion-plasma digital twin with barrier-scored control decisions."""

__version__ = "0.1.0"

from .control.digital_twin import DigitalTwin, TwinNotInitializedError
from .core.barrier import barrier_score

__all__ = [
    "__version__",
    "barrier_score",
    "DigitalTwin",
    "TwinNotInitializedError",
]
