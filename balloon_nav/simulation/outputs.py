"""Prediction result containers and serialization helpers."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from ..atmosphere.wind import Wind
from ..core.geodesy import GeoPoint


@dataclass(frozen=True, slots=True)
class SimulationPoint:
    position: GeoPoint
    alt_m: float
    time_s: float

    @property
    def lat_deg(self) -> float:
        return self.position.lat_deg

    @property
    def lon_deg(self) -> float:
        return self.position.lon_deg


Track = tuple[SimulationPoint, ...]


@dataclass(frozen=True, slots=True)
class LandingPrediction:
    path: Track
    landing_point: SimulationPoint
    ground_elevation_m: float
    total_time_s: float
    total_distance_m: float
    landed: bool = True


@dataclass(frozen=True, slots=True)
class MarkerDropPrediction:
    path: Track
    impact_point: SimulationPoint
    time_to_impact_s: float
    ground_elevation_m: float
    total_drift_m: float
    landed: bool = True


@dataclass(frozen=True, slots=True)
class ClimbPointResult:
    best_point: SimulationPoint
    distance_to_goal_m: float
    altitude_change_m: float
    climb_time_s: float
    lead_time_s: float
    total_time_s: float
    path: Track


@dataclass(frozen=True, slots=True)
class LandRunOption:
    leg1_alt_m: float
    leg2_alt_m: float
    leg1_wind: Wind
    leg2_wind: Wind
    angle_difference_deg: float
    triangle_area_m2: float
    leg1_distance_m: float
    leg2_distance_m: float
    leg1_time_s: float
    leg2_time_s: float
    point_a: GeoPoint
    point_b: GeoPoint
    point_c: GeoPoint
    path_ab: Track
    path_bc: Track
    approach_path: Track
    approach_time_s: float
    total_time_s: float


@dataclass(frozen=True, slots=True)
class LandRunResult:
    best: LandRunOption
    alternatives: tuple[LandRunOption, ...]


@dataclass(frozen=True, slots=True)
class AngleTaskOption:
    leg1_alt_m: float
    leg2_alt_m: float
    leg1_wind: Wind
    leg2_wind: Wind
    leg1_drift_deg: float
    leg1_deviation_deg: float
    achieved_angle_deg: float
    bearing_a_to_b_deg: float
    distance_ab_m: float
    point_a: GeoPoint
    point_b: GeoPoint
    path_leg2: Track
    approach_path: Track
    approach_time_s: float
    leg2_time_s: float
    total_time_s: float


@dataclass(frozen=True, slots=True)
class AngleTaskResult:
    best: AngleTaskOption
    alternatives: tuple[AngleTaskOption, ...]


def result_to_dict(result) -> dict[str, Any]:
    return asdict(result)


def save_json_summary(result, path: str | Path) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8") as f:
        json.dump(result_to_dict(result), f, indent=2)
    return out
