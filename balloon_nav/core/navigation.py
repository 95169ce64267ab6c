"""Piloting helpers built on the geodetic primitives."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime

from .constants import GRAVITY_MPS2
from .geodesy import (
    GeoPoint,
    destination_point,
    great_circle_distance_m,
    initial_bearing_deg,
)

_MIN_ETA_SPEED_MPS = 0.5


@dataclass(frozen=True, slots=True)
class TransitPoint:
    point: GeoPoint
    miss_distance_m: float


@dataclass(frozen=True, slots=True)
class DropAngle:
    angle_deg: float
    lead_distance_m: float


def angle_difference_deg(a_deg: float, b_deg: float) -> float:
    diff = abs(a_deg - b_deg) % 360.0
    if diff > 180.0:
        diff = 360.0 - diff
    return diff


def distance_3d_m(a: GeoPoint, alt_a_m: float, b: GeoPoint, alt_b_m: float) -> float:
    horizontal = great_circle_distance_m(a, b)
    return math.hypot(horizontal, alt_b_m - alt_a_m)


def transit_point(current: GeoPoint, heading_deg: float, target: GeoPoint) -> TransitPoint:
    """Closest approach to ``target`` when holding ``heading_deg`` from ``current``."""
    bearing_to_target = initial_bearing_deg(current, target)
    offset = math.radians(bearing_to_target - heading_deg)
    dist_to_target = great_circle_distance_m(current, target)

    along_track = dist_to_target * math.cos(offset)
    point = destination_point(current, heading_deg, along_track)
    return TransitPoint(point=point, miss_distance_m=abs(dist_to_target * math.sin(offset)))


def elbow_angle_deg(first: GeoPoint, vertex: GeoPoint, second: GeoPoint) -> float:
    return angle_difference_deg(
        initial_bearing_deg(vertex, first),
        initial_bearing_deg(vertex, second),
    )


def is_point_in_circle(point: GeoPoint, center: GeoPoint, radius_m: float) -> bool:
    return great_circle_distance_m(point, center) <= radius_m


def eta_seconds(current: GeoPoint, target: GeoPoint, speed_mps: float, heading_deg: float) -> float | None:
    """Time to target at the component of ground speed pointing at it.

    Returns ``None`` when moving too slowly or away from the target.
    """
    if speed_mps < _MIN_ETA_SPEED_MPS:
        return None

    offset = math.radians(initial_bearing_deg(current, target) - heading_deg)
    closing_speed = speed_mps * math.cos(offset)
    if closing_speed <= 0.0:
        return None
    return great_circle_distance_m(current, target) / closing_speed


def wind_from_fixes(
    first: GeoPoint,
    first_time: datetime,
    second: GeoPoint,
    second_time: datetime,
) -> tuple[float, float]:
    """Estimate ``(from_direction_deg, speed_mps)`` from two timestamped drift fixes."""
    dt = (second_time - first_time).total_seconds()
    if dt <= 0.0:
        return 0.0, 0.0

    track = initial_bearing_deg(first, second)
    return (track + 180.0) % 360.0, great_circle_distance_m(first, second) / dt


def drop_angle(altitude_m: float, ground_speed_mps: float) -> DropAngle:
    """Sight angle for a drag-free drop from ``altitude_m`` above the target."""
    fall_time = math.sqrt(2.0 * altitude_m / GRAVITY_MPS2)
    lead = ground_speed_mps * fall_time
    angle = 90.0 if lead == 0.0 else math.degrees(math.atan(altitude_m / lead))
    return DropAngle(angle_deg=angle, lead_distance_m=lead)
