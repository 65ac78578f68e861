# ──────────────────────────────────────────────────────────────────────
# TwinCosmos — Plasma Simulator
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Zero-dimensional tokamak plasma simulator advanced by explicit Euler steps.

Each step computes D-T fusion power from the pre-step density and
temperature, applies heating/cooling and fueling/exhaust, recomputes the
confinement time from the new temperature and scores the normalised
triple product through the logistic barrier (B=0.5, gamma=2.0).

Known gap: multiplicative cooling and exhaust are not guarded, so a
``delta_time`` above 100 s (cooling) or 1000 s (exhaust) drives the state
negative and ``log10`` of a non-positive temperature yields NaN.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .barrier import ScoringParams, normalize_input
from .plasma_state import PlasmaPhase, PlasmaSnapshot, PlasmaState

logger = logging.getLogger(__name__)

# Heat balance
HEATING_POWER_W = 50e6          # Auxiliary heating (NBI/ECRH)
COOLING_FACTOR = 0.01           # Fractional loss per second
# Particle balance
FUELING_RATE = 1e18             # m^-3 s^-1
EXHAUST_RATE = 0.001            # Fractional loss per second

KELVIN_PER_KEV = 1.16e7
DT_FUSION_ENERGY_J = 17.6 * 1.602e-13   # 17.6 MeV per D-T reaction

REFERENCE_DENSITY = 1e20
REFERENCE_TEMPERATURE = 1e8
REFERENCE_CONFINEMENT_S = 3.0
LAWSON_LIMIT = 3e21

BURN_TEMPERATURE = 1e8
BURN_POWER_W = 1e6
RAMP_UP_TEMPERATURE = 5e7

STABILITY_SCORING = ScoringParams(barrier=0.5, gamma=2.0)


@dataclass(frozen=True)
class PlasmaSimConfig:
    reactor_type: str = "tokamak"
    initial_temperature: float = 1e8     # K
    initial_density: float = 1e20        # m^-3
    confinement_time: float = 3.0        # s
    major_radius: float = 6.0            # m
    minor_radius: float = 2.0            # m
    magnetic_field: float = 5.0          # T


@dataclass(frozen=True)
class ControlAdjustment:
    """
    External actuator request.

    ``fueling`` scales density by ``1 + fueling``; ``magnetic_field``
    replaces the configured toroidal field.  ``heating`` is accepted for
    interface symmetry but has no effect on the plasma.
    """
    heating: Optional[float] = None
    fueling: Optional[float] = None
    magnetic_field: Optional[float] = None


def dt_reactivity(temperature_k: float) -> float:
    """Simplified D-T <sigma v> in m^3/s for a temperature given in Kelvin."""
    t_kev = temperature_k / KELVIN_PER_KEV
    return 1.1e-21 * (t_kev * t_kev) / (1.0 + t_kev / 15.0)


def fusion_power_density(density: float, temperature_k: float) -> float:
    """P = n^2 * <sigma v> * E_fus in W/m^3."""
    return density * density * dt_reactivity(temperature_k) * DT_FUSION_ENERGY_J


class PlasmaSimulator:
    """Explicit-step plasma parameter simulator."""

    def __init__(self, config: PlasmaSimConfig | None = None):
        self.cfg = config or PlasmaSimConfig()
        self._magnetic_field = float(self.cfg.magnetic_field)
        self.state = PlasmaState(
            temperature=float(self.cfg.initial_temperature),
            density=float(self.cfg.initial_density),
            confinement_time=float(self.cfg.confinement_time),
        )

    @property
    def magnetic_field(self) -> float:
        return self._magnetic_field

    def calculate_fusion_power(self) -> float:
        return fusion_power_density(self.state.density, self.state.temperature)

    def calculate_confinement_time(self) -> float:
        ratio = self.state.temperature / REFERENCE_TEMPERATURE
        return float(REFERENCE_CONFINEMENT_S * (1.0 + 0.1 * np.log10(ratio)))

    def triple_product_fraction(self) -> float:
        """Normalised n*T*tau over the Lawson constant, capped at 1."""
        n = self.state.density / REFERENCE_DENSITY
        t = self.state.temperature / REFERENCE_TEMPERATURE
        tau = self.state.confinement_time / REFERENCE_CONFINEMENT_S
        return min(1.0, n * t * tau / LAWSON_LIMIT)

    def calculate_stability(self) -> float:
        return STABILITY_SCORING.score(normalize_input(self.triple_product_fraction()))

    def _next_phase(self) -> PlasmaPhase:
        s = self.state
        if s.temperature > BURN_TEMPERATURE and s.fusion_power > BURN_POWER_W:
            candidate = PlasmaPhase.BURN
        elif s.temperature > RAMP_UP_TEMPERATURE:
            candidate = PlasmaPhase.RAMP_UP
        else:
            return s.phase
        # No back-edges: a cooling burn plasma stays in burn.
        if candidate.rank > s.phase.rank:
            return candidate
        return s.phase

    def step(self, delta_time: float = 1.0) -> PlasmaState:
        """Advance one step of ``delta_time`` seconds and return a state copy."""
        dt = float(delta_time)
        s = self.state
        s.elapsed_time += dt

        power = self.calculate_fusion_power()

        s.temperature += (HEATING_POWER_W + power) * dt / 1000.0
        s.temperature *= 1.0 - COOLING_FACTOR * dt

        s.density += FUELING_RATE * dt
        s.density *= 1.0 - EXHAUST_RATE * dt

        s.confinement_time = self.calculate_confinement_time()
        s.fusion_power = power
        s.stability = self.calculate_stability()

        previous = s.phase
        s.phase = self._next_phase()
        if s.phase is not previous:
            logger.info(
                "Phase transition %s -> %s at t=%.3fs",
                previous.value, s.phase.value, s.elapsed_time,
            )

        s.record()
        logger.debug(
            "t=%.3fs T=%.4e n=%.4e P=%.4e stability=%.4f",
            s.elapsed_time, s.temperature, s.density, power, s.stability,
        )
        return s.copy()

    def get_state(self) -> PlasmaState:
        return self.state.copy()

    def get_history(self) -> Tuple[PlasmaSnapshot, ...]:
        return tuple(self.state.history)

    def apply_control(self, control: ControlAdjustment) -> None:
        if control.heating:
            logger.debug("Heating adjustment %.3g ignored", control.heating)
        if control.fueling:
            self.state.density *= 1.0 + float(control.fueling)
        if control.magnetic_field:
            self._magnetic_field = float(control.magnetic_field)
