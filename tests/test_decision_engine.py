# ──────────────────────────────────────────────────────────────────────
# TwinCosmos — Decision Engine Tests
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""Rule selection, confidence and pattern-learning tests."""

from __future__ import annotations

import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

from twincosmos.control.decision_engine import (
    ALGORITHM_CATALOG,
    ControlCategory,
    NON_FINITE_BIN,
    ControlChoice,
    DecisionEngine,
    DecisionEngineConfig,
    DecisionInput,
    PatternKey,
    PatternStats,
    pattern_similarity,
)
from twincosmos.core.plasma_sim import PlasmaSimulator
from twincosmos.core.plasma_state import PlasmaPhase

COLD_START = {"temperature": 1e6, "density": 1e18, "stability": 0.1, "fusion_power": 0.0}
BURN = {
    "temperature": 1.5e8,
    "density": 1e20,
    "stability": 0.85,
    "fusion_power": 5e7,
    "phase": "burn",
}


def test_cold_start_selects_aggressive_pid() -> None:
    engine = DecisionEngine()
    decision = engine.decide(COLD_START)
    assert decision.heating.algorithm == "PID"
    assert "aggressive PID" in decision.heating.reason
    assert decision.fueling.algorithm == "Pulsed"
    assert decision.magnetic.algorithm == "AI"


def test_cold_start_heating_ignores_pattern_history() -> None:
    engine = DecisionEngine()
    for _ in range(5):
        engine.decide(BURN)
    assert engine.decide(COLD_START).heating.algorithm == "PID"


def test_rules_fall_through_in_order() -> None:
    engine = DecisionEngine()
    d = engine.decide({"temperature": 8e7, "density": 1e20, "stability": 0.2, "fusion_power": 1e6})
    assert d.actions == {"heating": "ML-PID", "fueling": "Predictive", "magnetic": "AI"}

    d = engine.decide({"temperature": 8e7, "density": 1e20, "stability": 0.35, "fusion_power": 1e6})
    assert d.fueling.algorithm == "Predictive"
    assert d.heating.algorithm == "PID"
    assert d.heating.reason == "Normal operation"


def test_burn_phase_rules() -> None:
    d = DecisionEngine().decide(BURN)
    assert d.actions == {"heating": "Adaptive", "fueling": "Feedback", "magnetic": "Optimized"}
    assert len(d.rationale) == 3


def test_first_decision_uses_default_match_score() -> None:
    d = DecisionEngine().decide(COLD_START)
    assert d.match_score == 0.5
    assert d.confidence == 0.5
    assert d.should_act is False


def test_repeated_state_raises_confidence() -> None:
    engine = DecisionEngine()
    engine.decide(COLD_START)
    d = engine.decide(COLD_START)
    assert d.match_score == 1.0
    assert d.confidence == pytest.approx(1.0 / (1.0 + math.exp(-1.5)))
    assert d.should_act is True


def test_custom_threshold_controls_should_act() -> None:
    engine = DecisionEngine(DecisionEngineConfig(decision_threshold=0.4))
    assert engine.decide(COLD_START).should_act is True


def test_pattern_key_quantizes_state() -> None:
    key = PatternKey.from_reading(DecisionInput.coerce(BURN))
    assert key == PatternKey(15, 10, 8)
    assert str(key) == "15_10_8"


@given(
    t_bin=st.integers(min_value=0, max_value=30),
    d_bin=st.integers(min_value=0, max_value=30),
    s_bin=st.integers(min_value=0, max_value=9),
    f1=st.floats(min_value=0.05, max_value=0.9),
    f2=st.floats(min_value=0.05, max_value=0.9),
)
def test_same_bucket_accumulates_into_one_pattern(
    t_bin: int, d_bin: int, s_bin: int, f1: float, f2: float
) -> None:
    engine = DecisionEngine()
    for frac in (f1, f2):
        engine.decide({
            "temperature": (t_bin + frac) * 1e7,
            "density": (d_bin + frac) * 1e19,
            "stability": (s_bin + frac) / 10.0,
            "fusion_power": 0.0,
        })
    patterns = engine.get_patterns()
    assert len(patterns) == 1
    assert patterns[0].count == 2
    assert patterns[0].key == PatternKey(t_bin, d_bin, s_bin)
    # Seeded with the first reading, not averaged.
    assert patterns[0].temperature == (t_bin + f1) * 1e7


def test_success_score_accumulates_per_bucket() -> None:
    engine = DecisionEngine()
    engine.decide({"temperature": 1.05e8, "density": 1.0e20, "stability": 0.62, "fusion_power": 1e9})
    engine.decide({"temperature": 1.09e8, "density": 1.05e20, "stability": 0.65, "fusion_power": 1e9})
    (record,) = engine.get_patterns()
    assert record.count == 2
    assert record.total_score == 2.0
    assert record.avg_score == 1.0


def test_stable_decision_promotes_current_best() -> None:
    engine = DecisionEngine()
    engine.decide(BURN)
    assert engine.current_best == {
        ControlCategory.HEATING: "Adaptive",
        ControlCategory.FUELING: "Feedback",
        ControlCategory.MAGNETIC: "Optimized",
    }
    d = engine.decide({
        "temperature": 1e8,
        "density": 1e20,
        "stability": 0.95,
        "fusion_power": 1e8,
        "phase": "ramp-up",
    })
    assert d.heating == ControlChoice("Adaptive", "Normal operation")
    assert d.magnetic.algorithm == "Optimized"


def test_unstable_decision_keeps_current_best() -> None:
    engine = DecisionEngine()
    engine.decide({"temperature": 8e7, "density": 1e20, "stability": 0.5, "fusion_power": 1e6})
    assert engine.current_best[ControlCategory.HEATING] == "PID"
    assert engine.current_best[ControlCategory.FUELING] == "Feedback"
    assert engine.current_best[ControlCategory.MAGNETIC] == "Adaptive"


def test_patterns_sorted_by_average_success() -> None:
    engine = DecisionEngine()
    engine.decide(COLD_START)
    engine.decide(BURN)
    patterns = engine.get_patterns()
    assert [p.avg_score for p in patterns] == [1.0, 0.0]
    assert patterns[0].key == PatternKey(15, 10, 8)


def test_similarity_weights_stability_double() -> None:
    pattern = PatternStats(temperature=1e8, density=1e20, stability=0.5, fusion_power=1e6)
    current = DecisionInput(temperature=1e8, density=1e20, stability=0.9, fusion_power=1e6)
    assert pattern_similarity(current, pattern) == pytest.approx(3.0 / 5.0)


def test_similarity_skips_undefined_pattern_keys() -> None:
    empty = PatternStats(temperature=None, density=None, stability=None, fusion_power=None)
    current = DecisionInput(temperature=1e8, density=1e20, stability=0.5)
    assert pattern_similarity(current, empty) == 0.0

    partial = PatternStats(temperature=1e8, density=1e20, stability=0.5, fusion_power=1e6)
    assert pattern_similarity(current, partial) == pytest.approx(4.0 / 5.0)


def test_match_score_is_best_over_patterns() -> None:
    engine = DecisionEngine()
    engine.decide(COLD_START)
    engine.decide(BURN)
    reading = DecisionInput.coerce(BURN)
    assert engine.calculate_match_score(reading) == 1.0


def test_decide_accepts_plasma_state() -> None:
    state = PlasmaSimulator().step(1.0)
    d = DecisionEngine().decide(state)
    assert d.state.phase is PlasmaPhase.BURN
    assert d.state.fusion_power == state.fusion_power
    assert d.heating.algorithm == "ML-PID"


def test_history_is_append_only_with_increasing_ticks() -> None:
    engine = DecisionEngine()
    for _ in range(4):
        engine.decide(COLD_START)
    history = engine.get_history()
    assert [d.tick for d in history] == [0, 1, 2, 3]
    assert all(a.timestamp <= b.timestamp for a, b in zip(history, history[1:]))


def test_catalog_covers_every_selectable_label() -> None:
    engine = DecisionEngine()
    for state in (COLD_START, BURN):
        d = engine.decide(state)
        for category in ControlCategory:
            assert d.choice(category).algorithm in ALGORITHM_CATALOG[category]


def test_mapping_accepts_camel_case_fusion_power() -> None:
    reading = DecisionInput.coerce(
        {"temperature": 1e8, "density": 1e20, "stability": 0.5, "fusionPower": 1e6}
    )
    assert reading.fusion_power == 1e6


def test_non_finite_readings_share_one_bucket() -> None:
    engine = DecisionEngine()
    inf_reading = {"temperature": float("inf"), "density": 1e20, "stability": 0.9, "fusion_power": float("inf")}
    nan_reading = {"temperature": float("nan"), "density": float("nan"), "stability": 0.9, "fusion_power": 0.0}

    first = engine.decide(inf_reading)
    engine.decide(nan_reading)

    assert first.heating.algorithm in ALGORITHM_CATALOG[ControlCategory.HEATING]
    keys = {p.key for p in engine.get_patterns()}
    assert keys == {PatternKey(NON_FINITE_BIN, 10, 9), PatternKey(NON_FINITE_BIN, NON_FINITE_BIN, 9)}
    assert len(engine.get_history()) == 2
