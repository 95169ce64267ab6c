"""Angle Task (ANG) optimizer: leg-2 drift deviating most from a set direction."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import product
from typing import Iterable

from ..atmosphere.wind import WindLayer, WindProfile
from ..config import TaskConfig, steps_per_interval
from ..core.geodesy import GeoPoint, great_circle_distance_m, initial_bearing_deg
from ..core.navigation import angle_difference_deg
from ..simulation.outputs import AngleTaskOption, AngleTaskResult, SimulationPoint
from .legs import Approach, MapBounds, TransitionLeg, fly_approach, in_bounds, map_candidates, rank

logger = logging.getLogger(__name__)

WINDOW_DISTANCE = "distance"
WINDOW_TIME = "time"
WINDOW_CHOICES = (WINDOW_DISTANCE, WINDOW_TIME)


@dataclass(frozen=True, slots=True)
class LegWindow:
    """Where point B may lie: meters from A (``distance``) or seconds after A (``time``)."""

    kind: str
    minimum: float
    maximum: float

    def __post_init__(self):
        if self.kind not in WINDOW_CHOICES:
            raise ValueError(f"Unsupported window kind: {self.kind!r}. Expected one of {WINDOW_CHOICES}.")


@dataclass(slots=True)
class _Candidate:
    point: GeoPoint
    alt_m: float
    distance_m: float
    time_s: float
    angle_deg: float = 0.0


def optimize_angle_task(
    pilot: GeoPoint,
    pilot_alt_m: float,
    climb_rate_mps: float,
    wind_layers: Iterable[WindLayer],
    set_direction_deg: float,
    window: LegWindow,
    map_bounds: MapBounds | None = None,
    fixed_point_a: GeoPoint | None = None,
    config: TaskConfig | None = None,
) -> AngleTaskResult | None:
    """Search (leg-1, leg-2) altitude pairs for the largest angle between A->B and the set direction.

    Point A is reached by climbing to the leg-1 altitude, unless
    ``fixed_point_a`` is given. In distance mode B is the last point inside
    the window; in time mode B is the best-angle point inside the window and
    the leg-2 path is trimmed after it.
    """
    cfg = config or TaskConfig()
    layers = list(wind_layers)
    profile = WindProfile(layers)
    if len(layers) < 2 or climb_rate_mps <= 0.0:
        logger.debug("Angle task rejected: layers=%d climb_rate=%s", len(layers), climb_rate_mps)
        return None

    altitudes = profile.altitudes_m
    approaches: dict[float, Approach] = {}
    for alt in altitudes:
        if profile.wind_at(alt).speed_mps < cfg.min_wind_speed_mps:
            continue
        if fixed_point_a is not None:
            approaches[alt] = Approach(path=(), end=fixed_point_a, time_s=0.0)
        else:
            approaches[alt] = fly_approach(pilot, pilot_alt_m, alt, climb_rate_mps, profile, cfg)

    pairs = [
        (leg1, leg2)
        for leg1, leg2 in product(altitudes, altitudes)
        if leg1 in approaches and in_bounds(map_bounds, approaches[leg1].end)
    ]

    def evaluate(pair: tuple[float, float]) -> AngleTaskOption | None:
        leg1, leg2 = pair
        return _evaluate_pair(
            leg1, leg2, approaches[leg1], climb_rate_mps, profile, set_direction_deg, window, map_bounds, cfg
        )

    options = [option for option in map_candidates(evaluate, pairs, cfg.workers) if option is not None]
    ranked = rank(options, key=lambda o: o.achieved_angle_deg, limit=cfg.max_alternatives)
    if ranked is None:
        logger.debug("Angle task found no qualifying candidate")
        return None
    best, alternatives = ranked
    return AngleTaskResult(best=best, alternatives=alternatives)


def _evaluate_pair(
    leg1_alt: float,
    leg2_alt: float,
    approach: Approach,
    climb_rate_mps: float,
    profile: WindProfile,
    set_direction_deg: float,
    window: LegWindow,
    bounds: MapBounds | None,
    cfg: TaskConfig,
) -> AngleTaskOption | None:
    leg1_wind = profile.wind_at(leg1_alt)
    leg2_wind = profile.wind_at(leg2_alt)
    if leg2_wind.speed_mps < cfg.min_wind_speed_mps:
        return None

    point_a = approach.end
    dt = cfg.time_step_s
    sample_every = steps_per_interval(cfg.path_sample_interval_s, dt)
    time_limit = window.maximum if window.kind == WINDOW_TIME else cfg.max_time_s

    leg = TransitionLeg(point_a, leg1_alt, leg2_alt, climb_rate_mps, leg2_wind, profile)
    path = [SimulationPoint(point_a, leg1_alt, 0.0)]
    best: _Candidate | None = None
    step = 0
    while step * dt < time_limit:
        step += 1
        elapsed = step * dt
        position = leg.advance(dt)
        if not in_bounds(bounds, position):
            return None

        dist = great_circle_distance_m(point_a, position)
        if window.kind == WINDOW_DISTANCE:
            if window.minimum <= dist <= window.maximum:
                best = _Candidate(position, leg.alt_m, dist, elapsed)
            if dist > window.maximum:
                break
        elif elapsed >= window.minimum:
            angle = angle_difference_deg(initial_bearing_deg(point_a, position), set_direction_deg)
            if best is None or angle > best.angle_deg:
                best = _Candidate(position, leg.alt_m, dist, elapsed, angle)

        if step % sample_every == 0:
            path.append(SimulationPoint(position, leg.alt_m, elapsed))

    if best is None:
        return None

    if window.kind == WINDOW_TIME:
        path = [p for p in path if p.time_s <= best.time_s]
    path.append(SimulationPoint(best.point, best.alt_m, best.time_s))

    bearing_ab = initial_bearing_deg(point_a, best.point)
    leg1_drift = leg1_wind.drift_bearing_deg
    return AngleTaskOption(
        leg1_alt_m=leg1_alt,
        leg2_alt_m=leg2_alt,
        leg1_wind=leg1_wind,
        leg2_wind=leg2_wind,
        leg1_drift_deg=leg1_drift,
        leg1_deviation_deg=angle_difference_deg(leg1_drift, set_direction_deg),
        achieved_angle_deg=angle_difference_deg(bearing_ab, set_direction_deg),
        bearing_a_to_b_deg=bearing_ab,
        distance_ab_m=best.distance_m,
        point_a=point_a,
        point_b=best.point,
        path_leg2=tuple(path),
        approach_path=approach.path,
        approach_time_s=approach.time_s,
        leg2_time_s=best.time_s,
        total_time_s=approach.time_s + best.time_s,
    )
