# ──────────────────────────────────────────────────────────────────────
# TwinCosmos — Core Package Init
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
from .barrier import ScoringParams, barrier_score, normalize_input
from .plasma_state import HISTORY_LIMIT, PlasmaPhase, PlasmaSnapshot, PlasmaState
from .plasma_sim import (
    ControlAdjustment,
    PlasmaSimConfig,
    PlasmaSimulator,
    dt_reactivity,
    fusion_power_density,
)
from .config_schema import (
    DecisionParams,
    PlasmaParams,
    TwinConfig,
    load_config,
    validate_config,
)
