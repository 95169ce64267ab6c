"""Configuration model for the balloon navigation core."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from .core.constants import GRAVITY_MPS2, SEA_LEVEL_AIR_DENSITY_KGM3


@dataclass(slots=True)
class ElevationConfig:
    storage_dir: str = ".cache/hgt"
    cache_tiles: int = 20


@dataclass(slots=True)
class LandingConfig:
    time_step_s: float = 5.0
    max_time_s: float = 3_600.0
    path_sample_interval_s: float = 30.0
    elevation_check_interval_steps: int = 12


@dataclass(slots=True)
class MarkerConfig:
    mass_kg: float = 0.07
    drag_coefficient: float = 1.2
    area_m2: float = 0.003
    air_density_kgm3: float = SEA_LEVEL_AIR_DENSITY_KGM3
    gravity_mps2: float = GRAVITY_MPS2
    time_step_s: float = 0.5
    max_time_s: float = 300.0
    path_sample_interval_s: float = 1.0

    @property
    def drag_factor(self) -> float:
        """0.5 * rho * Cd * A, so that drag force = drag_factor * v**2."""
        return 0.5 * self.air_density_kgm3 * self.drag_coefficient * self.area_m2


@dataclass(slots=True)
class ClimbConfig:
    time_step_s: float = 1.0
    max_time_s: float = 3_600.0
    path_sample_interval_s: float = 10.0
    ramp_up_s: float = 30.0
    min_altitude_m: float = 0.0
    max_altitude_m: float = 10_000.0
    divergence_factor: float = 1.5


@dataclass(slots=True)
class TaskConfig:
    time_step_s: float = 1.0
    max_time_s: float = 3_600.0
    path_sample_interval_s: float = 10.0
    min_wind_speed_mps: float = 0.1
    max_alternatives: int = 5
    workers: int = 0


@dataclass(slots=True)
class NavigatorConfig:
    elevation: ElevationConfig = field(default_factory=ElevationConfig)
    landing: LandingConfig = field(default_factory=LandingConfig)
    marker: MarkerConfig = field(default_factory=MarkerConfig)
    climb: ClimbConfig = field(default_factory=ClimbConfig)
    tasks: TaskConfig = field(default_factory=TaskConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NavigatorConfig":
        return cls(
            elevation=ElevationConfig(**data.get("elevation", {})),
            landing=LandingConfig(**data.get("landing", {})),
            marker=MarkerConfig(**data.get("marker", {})),
            climb=ClimbConfig(**data.get("climb", {})),
            tasks=TaskConfig(**data.get("tasks", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def steps_per_interval(interval_s: float, time_step_s: float) -> int:
    """Number of integration steps between two retained path samples."""
    return max(1, int(round(interval_s / time_step_s)))


def load_config(path: str | Path | None) -> NavigatorConfig:
    if path is None:
        return NavigatorConfig()

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    if config_path.suffix.lower() != ".json":
        raise ValueError("Only JSON config files are supported")

    with config_path.open("r", encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, dict):
        raise ValueError("Config root must be a JSON object")
    return NavigatorConfig.from_dict(raw)
