# ──────────────────────────────────────────────────────────────────────
# TwinCosmos — Plasma State
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Defines the plasma state shared between the simulator, the decision
engine and the analysis helpers.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Deque, Dict

HISTORY_LIMIT = 1000


class PlasmaPhase(str, Enum):
    IGNITION = "ignition"
    RAMP_UP = "ramp-up"
    BURN = "burn"
    DECLINE = "decline"

    @property
    def rank(self) -> int:
        return _PHASE_ORDER.index(self)


_PHASE_ORDER = (
    PlasmaPhase.IGNITION,
    PlasmaPhase.RAMP_UP,
    PlasmaPhase.BURN,
    PlasmaPhase.DECLINE,
)


@dataclass(frozen=True)
class PlasmaSnapshot:
    """One history row, recorded at the end of a simulator step."""
    elapsed_time: float
    temperature: float
    density: float
    fusion_power: float
    stability: float
    phase: PlasmaPhase

    def to_dict(self) -> Dict[str, Any]:
        return {
            "elapsed_time": self.elapsed_time,
            "temperature": self.temperature,
            "density": self.density,
            "fusion_power": self.fusion_power,
            "stability": self.stability,
            "phase": self.phase.value,
        }


@dataclass
class PlasmaState:
    """
    Zero-dimensional plasma state.

    Units: temperature in K, density in m^-3, confinement time and elapsed
    time in s, fusion power in W.  ``stability`` is the barrier score of the
    normalised triple product and lies in (0, 1).
    """
    temperature: float = 1e8
    density: float = 1e20
    confinement_time: float = 3.0
    fusion_power: float = 0.0
    stability: float = 0.5
    phase: PlasmaPhase = PlasmaPhase.IGNITION
    elapsed_time: float = 0.0
    history: Deque[PlasmaSnapshot] = field(
        default_factory=lambda: deque(maxlen=HISTORY_LIMIT)
    )

    def snapshot(self) -> PlasmaSnapshot:
        return PlasmaSnapshot(
            elapsed_time=self.elapsed_time,
            temperature=self.temperature,
            density=self.density,
            fusion_power=self.fusion_power,
            stability=self.stability,
            phase=self.phase,
        )

    def record(self) -> PlasmaSnapshot:
        """Append the current snapshot; the deque evicts the oldest row at the limit."""
        snap = self.snapshot()
        self.history.append(snap)
        return snap

    def copy(self) -> PlasmaState:
        """Detached copy; snapshots are immutable so a shallow history copy suffices."""
        return replace(self, history=deque(self.history, maxlen=self.history.maxlen))

