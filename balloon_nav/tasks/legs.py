"""Leg integration shared by the competition task optimizers."""

from __future__ import annotations

from contextlib import nullcontext
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable, TypeVar

from ..atmosphere.wind import Wind, WindProfile
from ..config import TaskConfig, steps_per_interval
from ..core.geodesy import GeoPoint, drift
from ..simulation.outputs import SimulationPoint

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True, slots=True)
class MapBounds:
    north: float
    south: float
    east: float
    west: float

    def contains(self, point: GeoPoint) -> bool:
        return self.south <= point.lat_deg <= self.north and self.west <= point.lon_deg <= self.east


def in_bounds(bounds: MapBounds | None, point: GeoPoint) -> bool:
    return bounds is None or bounds.contains(point)


@dataclass(frozen=True, slots=True)
class Approach:
    path: tuple[SimulationPoint, ...]
    end: GeoPoint
    time_s: float


def fly_approach(
    start: GeoPoint,
    start_alt_m: float,
    target_alt_m: float,
    climb_rate_mps: float,
    profile: WindProfile,
    cfg: TaskConfig,
) -> Approach:
    """Climb or sink at ``climb_rate_mps`` to ``target_alt_m``, drifting with the wind."""
    dt = cfg.time_step_s
    sample_every = steps_per_interval(cfg.path_sample_interval_s, dt)
    direction = 1.0 if target_alt_m > start_alt_m else -1.0
    duration = abs(target_alt_m - start_alt_m) / climb_rate_mps

    position = start
    alt = start_alt_m
    step = 0
    path = [SimulationPoint(position, alt, 0.0)]
    while step * dt < duration:
        step += 1
        alt += direction * climb_rate_mps * dt
        if (direction > 0 and alt > target_alt_m) or (direction < 0 and alt < target_alt_m):
            alt = target_alt_m
        wind = profile.wind_at(alt)
        position = drift(position, wind.direction_deg, wind.speed_mps, dt)
        if step % sample_every == 0:
            path.append(SimulationPoint(position, alt, step * dt))

    path.append(SimulationPoint(position, alt, step * dt))
    return Approach(path=tuple(path), end=position, time_s=step * dt)


class TransitionLeg:
    """Altitude change from ``from_alt_m`` to ``to_alt_m`` followed by drift at ``to_alt_m``.

    During the transition the wind is resolved at the current altitude; once
    the target altitude is reached the leg drifts with ``leg_wind``.
    """

    def __init__(
        self,
        start: GeoPoint,
        from_alt_m: float,
        to_alt_m: float,
        climb_rate_mps: float,
        leg_wind: Wind,
        profile: WindProfile,
    ):
        self.position = start
        self.alt_m = from_alt_m
        self.to_alt_m = to_alt_m
        self.climb_rate_mps = climb_rate_mps
        self.leg_wind = leg_wind
        self.profile = profile
        self.direction = 1.0 if to_alt_m > from_alt_m else -1.0
        self.transitioning = from_alt_m != to_alt_m

    def advance(self, dt: float) -> GeoPoint:
        if self.transitioning:
            self.alt_m += self.direction * self.climb_rate_mps * dt
            if (self.direction > 0 and self.alt_m >= self.to_alt_m) or (
                self.direction < 0 and self.alt_m <= self.to_alt_m
            ):
                self.alt_m = self.to_alt_m
                self.transitioning = False
            wind = self.profile.wind_at(self.alt_m)
        else:
            wind = self.leg_wind
        self.position = drift(self.position, wind.direction_deg, wind.speed_mps, dt)
        return self.position


def map_candidates(fn: Callable[[T], R], items: Iterable[T], workers: int) -> list[R]:
    """Evaluate candidates in order, optionally on a thread pool."""
    items = list(items)
    pool_context = ThreadPoolExecutor(max_workers=workers) if workers > 1 else nullcontext()
    with pool_context as pool:
        if pool is None:
            return [fn(item) for item in items]
        return list(pool.map(fn, items))


def rank(options: list[T], key: Callable[[T], float], limit: int) -> tuple[T, tuple[T, ...]] | None:
    if not options:
        return None
    ordered = sorted(options, key=key, reverse=True)
    return ordered[0], tuple(ordered[1 : 1 + limit])
