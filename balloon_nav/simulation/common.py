"""Pieces shared by the time-stepped drift simulators."""

from __future__ import annotations

import inspect
from typing import Awaitable, Callable, Union

from ..core.geodesy import GeoPoint

ElevationLookup = Callable[[float, float], Union[float, None, Awaitable[Union[float, None]]]]


async def query_elevation(lookup: ElevationLookup, point: GeoPoint) -> float | None:
    """Ask the elevation collaborator for ground height; it may be sync or async."""
    value = lookup(point.lat_deg, point.lon_deg)
    if inspect.isawaitable(value):
        value = await value
    return None if value is None else float(value)
