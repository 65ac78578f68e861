# ──────────────────────────────────────────────────────────────────────
# TwinCosmos — Control Module
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
from .decision_engine import (
    ALGORITHM_CATALOG,
    ControlCategory,
    ControlChoice,
    Decision,
    DecisionEngine,
    DecisionEngineConfig,
    DecisionInput,
    PatternKey,
    PatternRecord,
    PatternStats,
    pattern_similarity,
)
from .digital_twin import (
    DigitalTwin,
    TickResult,
    TwinNotInitializedError,
    TwinSnapshot,
)

__all__ = [
    "ALGORITHM_CATALOG",
    "ControlCategory",
    "ControlChoice",
    "Decision",
    "DecisionEngine",
    "DecisionEngineConfig",
    "DecisionInput",
    "DigitalTwin",
    "pattern_similarity",
    "PatternKey",
    "PatternRecord",
    "PatternStats",
    "TickResult",
    "TwinNotInitializedError",
    "TwinSnapshot",
]
