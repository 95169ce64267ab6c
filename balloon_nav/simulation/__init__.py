"""Drift simulators and prediction result containers."""

from .climb import find_climb_point
from .landing import predict_landing
from .marker import predict_marker_drop
from .outputs import (
    AngleTaskOption,
    AngleTaskResult,
    ClimbPointResult,
    LandingPrediction,
    LandRunOption,
    LandRunResult,
    MarkerDropPrediction,
    SimulationPoint,
    result_to_dict,
    save_json_summary,
)

__all__ = [
    "find_climb_point",
    "predict_landing",
    "predict_marker_drop",
    "AngleTaskOption",
    "AngleTaskResult",
    "ClimbPointResult",
    "LandingPrediction",
    "LandRunOption",
    "LandRunResult",
    "MarkerDropPrediction",
    "SimulationPoint",
    "result_to_dict",
    "save_json_summary",
]
