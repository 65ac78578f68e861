# ──────────────────────────────────────────────────────────────────────
# TwinCosmos — Decision Engine
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Rule-based selection of control algorithms with barrier-scored confidence.

For each control category (heating, fueling, magnetic) an ordered list of
threshold rules picks an algorithm label; when no rule fires the category
falls back to its current best label.  Confidence is the logistic barrier
score of how well the current state matches previously seen states.

Every decision is also learned: the state is quantised into a
``PatternKey`` bucket whose occurrence count and success score accumulate.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Tuple

from twincosmos.core.barrier import ScoringParams
from twincosmos.core.plasma_state import PlasmaPhase

logger = logging.getLogger(__name__)


class ControlCategory(str, Enum):
    HEATING = "heating"
    FUELING = "fueling"
    MAGNETIC = "magnetic"


ALGORITHM_CATALOG: Dict[ControlCategory, Tuple[str, ...]] = {
    ControlCategory.HEATING: ("PID", "ML-PID", "Adaptive", "Neural"),
    ControlCategory.FUELING: ("Constant", "Pulsed", "Feedback", "Predictive"),
    ControlCategory.MAGNETIC: ("Fixed", "Adaptive", "Optimized", "AI"),
}

DEFAULT_CURRENT_BEST: Dict[ControlCategory, str] = {
    ControlCategory.HEATING: "PID",
    ControlCategory.FUELING: "Feedback",
    ControlCategory.MAGNETIC: "Adaptive",
}

# Pattern similarity
SIMILARITY_WEIGHTS: Dict[str, float] = {
    "temperature": 1.0,
    "density": 1.0,
    "stability": 2.0,
    "fusion_power": 1.0,
}
MATCH_TOLERANCE = 0.2
NO_PATTERN_MATCH_SCORE = 0.5

# Pattern buckets
TEMPERATURE_BIN = 1e7
DENSITY_BIN = 1e19
STABILITY_BINS = 10
# Shared bucket index for inf/NaN readings
NON_FINITE_BIN = -(2 ** 63)

SUCCESS_STABILITY = 0.5
SUCCESS_PROMOTION_THRESHOLD = 0.8


@dataclass(frozen=True)
class DecisionInput:
    """The subset of plasma state the engine reads."""
    temperature: float
    density: float
    stability: float
    fusion_power: Optional[float] = None
    phase: Optional[PlasmaPhase] = None

    @classmethod
    def coerce(cls, state: Any) -> DecisionInput:
        """Build from a ``DecisionInput``, a ``PlasmaState``-like object or a mapping.

        Mappings may spell fusion power as ``fusionPower``.
        """
        if isinstance(state, cls):
            return state
        if isinstance(state, Mapping):
            get = state.get
        else:
            def get(name: str, default: Any = None) -> Any:
                return getattr(state, name, default)
        phase = get("phase")
        power = get("fusion_power")
        if power is None:
            power = get("fusionPower")
        return cls(
            temperature=float(get("temperature")),
            density=float(get("density")),
            stability=float(get("stability")),
            fusion_power=None if power is None else float(power),
            phase=None if phase is None else PlasmaPhase(phase),
        )


@dataclass(frozen=True)
class ControlChoice:
    algorithm: str
    reason: str


@dataclass(frozen=True)
class Decision:
    tick: int
    timestamp: float
    state: DecisionInput
    heating: ControlChoice
    fueling: ControlChoice
    magnetic: ControlChoice
    match_score: float
    confidence: float
    should_act: bool

    def choice(self, category: ControlCategory) -> ControlChoice:
        return getattr(self, ControlCategory(category).value)

    @property
    def actions(self) -> Dict[str, str]:
        return {c.value: self.choice(c).algorithm for c in ControlCategory}

    @property
    def rationale(self) -> Tuple[str, ...]:
        return tuple(self.choice(c).reason for c in ControlCategory)


def _bin(quotient: float) -> int:
    if not math.isfinite(quotient):
        return NON_FINITE_BIN
    return math.floor(quotient)


class PatternKey(NamedTuple):
    temperature_bin: int
    density_bin: int
    stability_bin: int

    @classmethod
    def from_reading(cls, reading: DecisionInput) -> PatternKey:
        return cls(
            _bin(reading.temperature / TEMPERATURE_BIN),
            _bin(reading.density / DENSITY_BIN),
            _bin(reading.stability * STABILITY_BINS),
        )

    def __str__(self) -> str:
        return f"{self.temperature_bin}_{self.density_bin}_{self.stability_bin}"


@dataclass
class PatternStats:
    """Aggregate for one bucket, seeded with the first reading that hit it."""
    temperature: Optional[float]
    density: Optional[float]
    stability: Optional[float]
    fusion_power: Optional[float]
    count: int = 0
    total_score: float = 0.0

    @property
    def avg_score(self) -> float:
        return self.total_score / self.count if self.count > 0 else 0.0


@dataclass(frozen=True)
class PatternRecord:
    key: PatternKey
    temperature: Optional[float]
    density: Optional[float]
    stability: Optional[float]
    fusion_power: Optional[float]
    count: int
    total_score: float
    avg_score: float


def pattern_similarity(current: DecisionInput, pattern: PatternStats) -> float:
    """
    Weighted fraction of features within tolerance of the pattern.

    A feature counts towards the total only if the pattern defines it; it
    matches when ``|current - pattern| / (pattern + 1) < 0.2``.
    """
    total_weight = 0.0
    matched_weight = 0.0
    for name, weight in SIMILARITY_WEIGHTS.items():
        reference = getattr(pattern, name)
        if reference is None:
            continue
        total_weight += weight
        value = getattr(current, name)
        if value is None:
            continue
        if abs(value - reference) / (reference + 1.0) < MATCH_TOLERANCE:
            matched_weight += weight
    return matched_weight / total_weight if total_weight > 0 else 0.0


@dataclass(frozen=True)
class DecisionEngineConfig:
    barrier: float = 0.5
    gamma: float = 1.5
    decision_threshold: float = 0.7


class DecisionEngine:
    """Threshold-rule algorithm selector with pattern-frequency learning."""

    def __init__(self, config: DecisionEngineConfig | None = None):
        self.cfg = config or DecisionEngineConfig()
        self.scoring = ScoringParams(barrier=self.cfg.barrier, gamma=self.cfg.gamma)
        self._history: List[Decision] = []
        self._patterns: Dict[PatternKey, PatternStats] = {}
        self._current_best: Dict[ControlCategory, str] = dict(DEFAULT_CURRENT_BEST)

    @property
    def current_best(self) -> Dict[ControlCategory, str]:
        return dict(self._current_best)

    # ── Confidence ────────────────────────────────────────────────────

    def calculate_match_score(self, reading: DecisionInput) -> float:
        if not self._patterns:
            return NO_PATTERN_MATCH_SCORE
        best = 0.0
        for stats in self._patterns.values():
            best = max(best, pattern_similarity(reading, stats))
        return best

    def calculate_confidence(self, reading: DecisionInput) -> Tuple[float, float]:
        """Return ``(match_score, confidence)``; the match score is not clamped."""
        match_score = self.calculate_match_score(reading)
        return match_score, self.scoring.score(match_score)

    # ── Rules ─────────────────────────────────────────────────────────

    def decide_heating(self, s: DecisionInput) -> ControlChoice:
        if s.temperature < 5e7:
            return ControlChoice("PID", "Temperature too low, use aggressive PID")
        if s.stability < 0.3:
            return ControlChoice("ML-PID", "Stability low, use ML-enhanced PID")
        if s.phase == PlasmaPhase.BURN:
            return ControlChoice("Adaptive", "Burn phase, adaptive control")
        return ControlChoice(self._current_best[ControlCategory.HEATING], "Normal operation")

    def decide_fueling(self, s: DecisionInput) -> ControlChoice:
        if s.density < 5e19:
            return ControlChoice("Pulsed", "Low density, pulsed fueling")
        if s.stability < 0.4:
            return ControlChoice("Predictive", "Low stability, predictive fueling")
        if s.phase == PlasmaPhase.BURN:
            return ControlChoice("Feedback", "Burn phase, feedback control")
        return ControlChoice(self._current_best[ControlCategory.FUELING], "Normal operation")

    def decide_magnetic(self, s: DecisionInput) -> ControlChoice:
        if s.stability < 0.3:
            return ControlChoice("AI", "Critical stability, use AI control")
        if s.phase == PlasmaPhase.BURN:
            return ControlChoice("Optimized", "Burn phase, optimized magnetic field")
        return ControlChoice(self._current_best[ControlCategory.MAGNETIC], "Normal operation")

    # ── Main entry point ──────────────────────────────────────────────

    def decide(self, state: Any) -> Decision:
        reading = DecisionInput.coerce(state)
        heating = self.decide_heating(reading)
        fueling = self.decide_fueling(reading)
        magnetic = self.decide_magnetic(reading)

        # Scored against patterns learned before this reading.
        match_score, confidence = self.calculate_confidence(reading)

        decision = Decision(
            tick=len(self._history),
            timestamp=time.time(),
            state=reading,
            heating=heating,
            fueling=fueling,
            magnetic=magnetic,
            match_score=match_score,
            confidence=confidence,
            should_act=confidence > self.cfg.decision_threshold,
        )
        self.learn(reading, decision)
        self._history.append(decision)
        logger.debug(
            "Decision #%d actions=%s confidence=%.4f act=%s",
            decision.tick, decision.actions, confidence, decision.should_act,
        )
        return decision

    def learn(self, reading: DecisionInput, decision: Decision) -> PatternKey:
        key = PatternKey.from_reading(reading)
        stats = self._patterns.get(key)
        if stats is None:
            stats = PatternStats(
                temperature=reading.temperature,
                density=reading.density,
                stability=reading.stability,
                fusion_power=reading.fusion_power,
            )
            self._patterns[key] = stats
            logger.debug("New pattern bucket %s", key)
        stats.count += 1

        success = 1.0 if reading.stability > SUCCESS_STABILITY else 0.0
        stats.total_score += success

        # The single-tick score is 0 or 1, so this fires iff stability > 0.5.
        if success > SUCCESS_PROMOTION_THRESHOLD:
            for category in ControlCategory:
                self._current_best[category] = decision.choice(category).algorithm
        return key

    # ── Accessors ─────────────────────────────────────────────────────

    def get_history(self) -> Tuple[Decision, ...]:
        return tuple(self._history)

    def get_patterns(self) -> List[PatternRecord]:
        records = [
            PatternRecord(
                key=key,
                temperature=stats.temperature,
                density=stats.density,
                stability=stats.stability,
                fusion_power=stats.fusion_power,
                count=stats.count,
                total_score=stats.total_score,
                avg_score=stats.avg_score,
            )
            for key, stats in self._patterns.items()
        ]
        return sorted(records, key=lambda r: r.avg_score, reverse=True)
