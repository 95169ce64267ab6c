"""Competition task optimizers."""

from .angle_task import LegWindow, optimize_angle_task
from .land_run import LandRunLimits, optimize_land_run, triangle_area_m2
from .legs import MapBounds

__all__ = [
    "LandRunLimits",
    "LegWindow",
    "MapBounds",
    "optimize_angle_task",
    "optimize_land_run",
    "triangle_area_m2",
]
