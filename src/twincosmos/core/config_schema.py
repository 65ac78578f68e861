# ─────────────────────────────────────────────────────────────────────
# TwinCosmos — Configuration Schema
# © 1998–2026 Miroslav Šotek. All rights reserved.
# ─────────────────────────────────────────────────────────────────────
"""
Strict schema validation for twin configurations using Pydantic.
Catches malformed configs before any component is built.
"""

import json
from pathlib import Path
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .plasma_sim import PlasmaSimConfig

# Sub-models use extra='allow' so that annotation fields in hand-written
# config files pass through validation without being dropped.

class PlasmaParams(BaseModel):
    model_config = ConfigDict(extra='allow')
    reactor_type: str = "tokamak"
    initial_temperature: float = Field(default=1e8, gt=0)
    initial_density: float = Field(default=1e20, gt=0)
    confinement_time: float = Field(default=3.0, gt=0)
    major_radius: float = Field(default=6.0, gt=0)
    minor_radius: float = Field(default=2.0, gt=0)
    magnetic_field: float = Field(default=5.0, gt=0)

    @field_validator("minor_radius")
    @classmethod
    def minor_radius_below_major(cls, v: float, info):
        if "major_radius" in info.data and v >= info.data["major_radius"]:
            raise ValueError("minor_radius must be smaller than major_radius")
        return v

    def to_sim_config(self) -> PlasmaSimConfig:
        return PlasmaSimConfig(
            reactor_type=self.reactor_type,
            initial_temperature=self.initial_temperature,
            initial_density=self.initial_density,
            confinement_time=self.confinement_time,
            major_radius=self.major_radius,
            minor_radius=self.minor_radius,
            magnetic_field=self.magnetic_field,
        )

class DecisionParams(BaseModel):
    model_config = ConfigDict(extra='allow')
    barrier: float = Field(default=0.5, ge=0.0, le=1.0)
    gamma: float = Field(default=1.5, gt=0)
    decision_threshold: float = Field(default=0.7, ge=0.0, le=1.0)

class TwinConfig(BaseModel):
    model_config = ConfigDict(extra='allow')

    twin_name: str = "TwinCosmos"
    memory_enabled: bool = True
    fusion_enabled: bool = True
    decision_enabled: bool = True
    run_delta_time: float = Field(default=0.1, gt=0)
    plasma: PlasmaParams = Field(default_factory=PlasmaParams)
    decision: DecisionParams = Field(default_factory=DecisionParams)

def validate_config(config_dict: dict) -> TwinConfig:
    """Validate a raw configuration dictionary and return a validated TwinConfig."""
    return TwinConfig.model_validate(config_dict)

def load_config(path: Union[str, Path]) -> TwinConfig:
    """Read and validate a JSON configuration file."""
    config_path = Path(path)
    if not config_path.is_file():
        raise FileNotFoundError(f"Twin config not found: {config_path}")
    with config_path.open("r", encoding="utf-8") as fh:
        return validate_config(json.load(fh))
