# ──────────────────────────────────────────────────────────────────────
# TwinCosmos — Digital Twin Orchestrator
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Tick driver wiring the plasma simulator, the decision engine and the
memory log together.

Each tick runs, in order: plasma step -> decision -> memory write.  Any of
the three components can be disabled through the config; a disabled
component contributes ``None`` to the tick result and never raises.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Mapping, Optional, Tuple, Union

from twincosmos.control.decision_engine import (
    Decision,
    DecisionEngine,
    DecisionEngineConfig,
)
from twincosmos.core.config_schema import TwinConfig, validate_config
from twincosmos.core.plasma_sim import ControlAdjustment, PlasmaSimulator
from twincosmos.core.plasma_state import PlasmaSnapshot, PlasmaState
from twincosmos.io.memory_store import MemoryStore

logger = logging.getLogger(__name__)


class TwinNotInitializedError(RuntimeError):
    """Raised when the twin is driven before ``initialize()``."""


@dataclass(frozen=True)
class TickResult:
    time: float
    plasma: Optional[PlasmaState]
    decision: Optional[Decision]
    memory_key: Optional[str]


@dataclass(frozen=True)
class TwinSnapshot:
    initialized: bool
    time: float
    plasma: Optional[PlasmaState]
    decisions: Tuple[Decision, ...]


def js_number_text(value: float) -> str:
    """
    Shortest round-trip text of ``value`` in ECMAScript ``Number#toString``
    form: plain decimals for 1e-6 <= |x| < 1e21 (integral values without a
    fractional part), ``1e-7``/``1e+21`` exponent notation outside.
    """
    x = float(value)
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "Infinity" if x > 0 else "-Infinity"
    if x == 0.0:
        return "0"
    sign = "-" if x < 0 else ""
    _, digits_tuple, exponent = Decimal(repr(abs(x))).normalize().as_tuple()
    digits = "".join(str(d) for d in digits_tuple)
    k = len(digits)
    n = exponent + k
    if k <= n <= 21:
        body = digits + "0" * (n - k)
    elif 0 < n <= 21:
        body = digits[:n] + "." + digits[n:]
    elif -6 < n <= 0:
        body = "0." + "0" * (-n) + digits
    else:
        e = n - 1
        mantissa = digits[0] + ("." + digits[1:] if k > 1 else "")
        exp_sign = "+" if e >= 0 else "-"
        body = f"{mantissa}e{exp_sign}{abs(e)}"
    return sign + body


def format_time_key(t: float) -> str:
    return f"step_{js_number_text(t)}"


class DigitalTwin:
    """Single-threaded plasma/decision/memory tick loop."""

    def __init__(self, config: Union[TwinConfig, Mapping[str, Any], None] = None):
        if config is None:
            self.cfg = TwinConfig()
        elif isinstance(config, TwinConfig):
            self.cfg = config
        else:
            self.cfg = validate_config(dict(config))
        self.time = 0.0
        self.initialized = False
        self.plasma: Optional[PlasmaSimulator] = None
        self.decision: Optional[DecisionEngine] = None
        self.memory: Optional[MemoryStore] = None

    def initialize(self) -> DigitalTwin:
        if self.initialized:
            logger.warning("%s already initialized; keeping existing components", self.cfg.twin_name)
            return self
        logger.info("Initializing %s", self.cfg.twin_name)

        if self.cfg.memory_enabled:
            self.memory = MemoryStore()
            logger.info("Memory log ready (in-memory)")

        if self.cfg.fusion_enabled:
            self.plasma = PlasmaSimulator(self.cfg.plasma.to_sim_config())
            logger.info(
                "Plasma simulator ready: %s T0=%.3e K n0=%.3e m^-3",
                self.cfg.plasma.reactor_type,
                self.cfg.plasma.initial_temperature,
                self.cfg.plasma.initial_density,
            )

        if self.cfg.decision_enabled:
            params = self.cfg.decision
            self.decision = DecisionEngine(DecisionEngineConfig(
                barrier=params.barrier,
                gamma=params.gamma,
                decision_threshold=params.decision_threshold,
            ))
            logger.info("Decision engine ready (B=%.3f, gamma=%.3f)", params.barrier, params.gamma)

        self.initialized = True
        return self

    def _require_initialized(self) -> None:
        if not self.initialized:
            raise TwinNotInitializedError(
                f"{self.cfg.twin_name} not initialized; call initialize() first."
            )

    def step(self, delta_time: float = 1.0) -> TickResult:
        self._require_initialized()
        self.time += float(delta_time)

        plasma_state: Optional[PlasmaState] = None
        if self.plasma is not None:
            plasma_state = self.plasma.step(delta_time)

        decision: Optional[Decision] = None
        if self.decision is not None and plasma_state is not None:
            decision = self.decision.decide(plasma_state)

        memory_key: Optional[str] = None
        if self.memory is not None and decision is not None:
            memory_key = format_time_key(self.time)
            self.memory.store(
                memory_key,
                decision,
                {"timestamp": time.time(), "type": "decision"},
            )

        logger.debug(
            "Tick t=%.3fs complete", self.time,
            extra={"twin_context": {
                "time": self.time,
                "phase": plasma_state.phase.value if plasma_state is not None else None,
                "should_act": decision.should_act if decision is not None else None,
                "memory_key": memory_key,
            }},
        )
        return TickResult(
            time=self.time,
            plasma=plasma_state,
            decision=decision,
            memory_key=memory_key,
        )

    def run(
        self,
        steps: int = 100,
        on_step: Optional[Callable[[TickResult, int], None]] = None,
        delta_time: Optional[float] = None,
    ) -> TwinSnapshot:
        dt = self.cfg.run_delta_time if delta_time is None else float(delta_time)
        logger.info("Running %d ticks (dt=%.3gs)", int(steps), dt)
        for i in range(int(steps)):
            result = self.step(dt)
            if on_step is not None:
                on_step(result, i)
        logger.info("Run complete at t=%.3fs", self.time)
        return self.get_state()

    def apply_control(self, adjustment: ControlAdjustment) -> None:
        self._require_initialized()
        if self.plasma is None:
            logger.info("Control adjustment ignored: plasma simulator disabled")
            return
        self.plasma.apply_control(adjustment)

    def get_state(self) -> TwinSnapshot:
        return TwinSnapshot(
            initialized=self.initialized,
            time=self.time,
            plasma=self.plasma.get_state() if self.plasma is not None else None,
            decisions=self.decision.get_history() if self.decision is not None else (),
        )

    def get_history(self) -> Tuple[PlasmaSnapshot, ...]:
        if self.plasma is None:
            return ()
        return self.plasma.get_history()
