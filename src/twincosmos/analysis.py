# ──────────────────────────────────────────────────────────────────────
# TwinCosmos — Run Analysis
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""Tabulation, summary statistics and plots for plasma history."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Sequence

import numpy as np
import pandas as pd

from twincosmos.core.barrier import barrier_score
from twincosmos.core.plasma_state import PlasmaSnapshot

HISTORY_COLUMNS = (
    "elapsed_time",
    "temperature",
    "density",
    "fusion_power",
    "stability",
    "phase",
)


def history_frame(history: Sequence[PlasmaSnapshot]) -> pd.DataFrame:
    """One row per snapshot, phase stored as its string label."""
    return pd.DataFrame([snap.to_dict() for snap in history], columns=list(HISTORY_COLUMNS))


def interpret_stability(probability: float) -> str:
    if probability > 0.7:
        return "Stable operation"
    if probability > 0.5:
        return "Marginal stability"
    return "Unstable"


def summarize_history(
    history: Sequence[PlasmaSnapshot],
    *,
    barrier: float = 0.5,
    gamma: float = 2.0,
) -> Dict[str, Any]:
    """
    Ranges of temperature, power and stability over the run, the barrier
    score of the mean stability and the number of steps spent per phase.
    """
    if len(history) == 0:
        raise ValueError("history must contain at least one snapshot.")
    df = history_frame(history)
    mean_stability = float(df["stability"].mean())
    probability = barrier_score(mean_stability, barrier, gamma)
    return {
        "steps": int(len(df)),
        "final_time": float(df["elapsed_time"].iloc[-1]),
        "temperature_min": float(df["temperature"].min()),
        "temperature_max": float(df["temperature"].max()),
        "fusion_power_min": float(df["fusion_power"].min()),
        "fusion_power_max": float(df["fusion_power"].max()),
        "stability_min": float(df["stability"].min()),
        "stability_max": float(df["stability"].max()),
        "stability_mean": mean_stability,
        "stability_probability": probability,
        "interpretation": interpret_stability(probability),
        "phase_counts": {str(k): int(v) for k, v in df["phase"].value_counts(sort=False).items()},
        "all_finite": bool(np.isfinite(df[["temperature", "density", "fusion_power"]].to_numpy()).all()),
    }


def plot_history(history: Sequence[PlasmaSnapshot], output_path: str | Path) -> Path:
    """Save temperature, fusion power and stability traces to a PNG."""
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    df = history_frame(history)
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fig, (ax1, ax2, ax3) = plt.subplots(3, 1, figsize=(10, 9), sharex=True)
    ax1.plot(df["elapsed_time"], df["temperature"] / 1e6, "r-")
    ax1.set_ylabel("Temperature (MK)")
    ax1.set_title("TwinCosmos Plasma History")
    ax1.grid(True)

    ax2.plot(df["elapsed_time"], df["fusion_power"] / 1e6, "k-")
    ax2.set_ylabel("Fusion Power (MW)")
    ax2.grid(True)

    ax3.plot(df["elapsed_time"], df["stability"], "b-")
    ax3.axhline(0.5, color="gray", linestyle="--", label="Barrier")
    ax3.set_ylabel("Stability")
    ax3.set_xlabel("Time (s)")
    ax3.legend()
    ax3.grid(True)

    plt.tight_layout()
    fig.savefig(path)
    plt.close(fig)
    return path
