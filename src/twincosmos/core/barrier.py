# ──────────────────────────────────────────────────────────────────────
# TwinCosmos — Logistic Barrier Scorer
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Logistic barrier scorer shared by the plasma stability metric and the
decision confidence metric.

    P = 1 / (1 + exp(-2 * gamma * (x - B)))

At ``x == B`` the score is exactly 0.5 for any gamma.  Larger gamma
sharpens the transition around the barrier.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


def barrier_score(x: float, barrier: float, gamma: float) -> float:
    """Map ``x`` to (0, 1) through the logistic barrier.

    No guard is applied to ``gamma``: extreme values saturate to 0.0/1.0
    (numpy emits an overflow warning) and non-finite values give NaN.
    """
    exponent = -2.0 * float(gamma) * (float(x) - float(barrier))
    return float(1.0 / (1.0 + np.exp(exponent)))


def normalize_input(value: float) -> float:
    """Clamp ``value`` to [0, 1]."""
    return float(np.clip(value, 0.0, 1.0))


@dataclass(frozen=True)
class ScoringParams:
    barrier: float = 0.5
    gamma: float = 2.0

    def score(self, x: float) -> float:
        return barrier_score(x, self.barrier, self.gamma)
