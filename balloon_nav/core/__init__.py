"""Core numerical and coordinate utilities."""

from .geodesy import (
    GeoPoint,
    destination_point,
    drift,
    great_circle_distance_m,
    initial_bearing_deg,
    normalize_bearing_deg,
    normalize_lon_deg,
)
from .navigation import angle_difference_deg

__all__ = [
    "GeoPoint",
    "destination_point",
    "drift",
    "great_circle_distance_m",
    "initial_bearing_deg",
    "normalize_bearing_deg",
    "normalize_lon_deg",
    "angle_difference_deg",
]
