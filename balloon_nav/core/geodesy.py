"""Spherical-earth geodesy used for all position math in the core."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .constants import EARTH_RADIUS_M


@dataclass(frozen=True, slots=True)
class GeoPoint:
    lat_deg: float
    lon_deg: float


def normalize_bearing_deg(bearing_deg: float) -> float:
    return (bearing_deg % 360.0 + 360.0) % 360.0


def normalize_lon_deg(lon_deg: float) -> float:
    return (lon_deg + 180.0) % 360.0 - 180.0


def great_circle_distance_m(a: GeoPoint, b: GeoPoint) -> float:
    """Haversine distance between two points in meters."""
    lat1 = math.radians(a.lat_deg)
    lat2 = math.radians(b.lat_deg)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.lon_deg - a.lon_deg)

    h = math.sin(d_lat / 2.0) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2.0) ** 2
    c = 2.0 * math.atan2(math.sqrt(h), math.sqrt(1.0 - h))
    return EARTH_RADIUS_M * c


def initial_bearing_deg(a: GeoPoint, b: GeoPoint) -> float:
    """Initial bearing from ``a`` towards ``b`` in [0, 360)."""
    lat1 = math.radians(a.lat_deg)
    lat2 = math.radians(b.lat_deg)
    d_lon = math.radians(b.lon_deg - a.lon_deg)

    y = math.sin(d_lon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(d_lon)
    return normalize_bearing_deg(math.degrees(math.atan2(y, x)))


def destination_point(origin: GeoPoint, bearing_deg: float, distance_m: float) -> GeoPoint:
    """Solve the direct problem: travel ``distance_m`` from ``origin`` along ``bearing_deg``."""
    lat = math.radians(origin.lat_deg)
    lon = math.radians(origin.lon_deg)
    brg = math.radians(bearing_deg)
    delta = distance_m / EARTH_RADIUS_M

    sin_lat = math.sin(lat)
    cos_lat = math.cos(lat)
    sin_delta = math.sin(delta)
    cos_delta = math.cos(delta)

    dest_lat = math.asin(sin_lat * cos_delta + cos_lat * sin_delta * math.cos(brg))
    dest_lon = lon + math.atan2(
        math.sin(brg) * sin_delta * cos_lat,
        cos_delta - sin_lat * math.sin(dest_lat),
    )
    return GeoPoint(math.degrees(dest_lat), normalize_lon_deg(math.degrees(dest_lon)))


def drift(origin: GeoPoint, wind_from_deg: float, wind_speed_mps: float, dt_s: float) -> GeoPoint:
    """Advect a point downwind for ``dt_s`` seconds."""
    return destination_point(origin, (wind_from_deg + 180.0) % 360.0, wind_speed_mps * dt_s)
