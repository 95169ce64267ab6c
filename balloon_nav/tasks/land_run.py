"""Land Run (LRN) optimizer: largest triangle A-B-C from two wind layers."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from itertools import permutations
from typing import Iterable

from ..atmosphere.wind import WindLayer, WindProfile
from ..config import TaskConfig, steps_per_interval
from ..core.geodesy import GeoPoint, drift, great_circle_distance_m, initial_bearing_deg
from ..core.navigation import angle_difference_deg
from ..simulation.outputs import LandRunOption, LandRunResult, SimulationPoint
from .legs import MapBounds, TransitionLeg, fly_approach, in_bounds, map_candidates, rank

logger = logging.getLogger(__name__)

LIMIT_LEG1 = "leg1"
LIMIT_LEG2 = "leg2"
LIMIT_BOTH = "leg1+leg2"
LIMIT_TOTAL = "total"
LIMIT_MODE_CHOICES = (LIMIT_LEG1, LIMIT_LEG2, LIMIT_BOTH, LIMIT_TOTAL)

UNIT_MINUTES = "min"
UNIT_KILOMETERS = "km"
LIMIT_UNIT_CHOICES = (UNIT_MINUTES, UNIT_KILOMETERS)


@dataclass(frozen=True, slots=True)
class LandRunLimits:
    """Leg budget.

    ``leg1``/``leg2`` give both legs the same budget taken from that leg's
    value, ``leg1+leg2`` uses separate values, ``total`` splits
    ``total_value`` evenly. Leg 2's budget counts from B and includes the
    altitude transition.
    """

    mode: str = LIMIT_BOTH
    unit: str = UNIT_MINUTES
    leg1_value: float = 0.0
    leg2_value: float = 0.0
    total_value: float = 0.0

    def __post_init__(self):
        if self.mode not in LIMIT_MODE_CHOICES:
            raise ValueError(f"Unsupported limit mode: {self.mode!r}. Expected one of {LIMIT_MODE_CHOICES}.")
        if self.unit not in LIMIT_UNIT_CHOICES:
            raise ValueError(f"Unsupported limit unit: {self.unit!r}. Expected one of {LIMIT_UNIT_CHOICES}.")

    def leg_budgets(self) -> tuple[float, float]:
        """Per-leg budget in seconds or meters, depending on ``unit``."""
        if self.mode == LIMIT_LEG1:
            leg1 = leg2 = self.leg1_value
        elif self.mode == LIMIT_LEG2:
            leg1 = leg2 = self.leg2_value
        elif self.mode == LIMIT_BOTH:
            leg1, leg2 = self.leg1_value, self.leg2_value
        else:
            leg1 = leg2 = self.total_value / 2.0
        scale = 1000.0 if self.unit == UNIT_KILOMETERS else 60.0
        return leg1 * scale, leg2 * scale


def triangle_area_m2(a: GeoPoint, b: GeoPoint, c: GeoPoint) -> float:
    """Area of triangle ABC in the tangent plane at A."""
    ab = great_circle_distance_m(a, b)
    ac = great_circle_distance_m(a, c)
    brg_ab = math.radians(initial_bearing_deg(a, b))
    brg_ac = math.radians(initial_bearing_deg(a, c))
    return 0.5 * ab * ac * abs(math.sin(brg_ac - brg_ab))


def optimize_land_run(
    pilot: GeoPoint,
    pilot_alt_m: float,
    climb_rate_mps: float,
    wind_layers: Iterable[WindLayer],
    limits: LandRunLimits,
    map_bounds: MapBounds | None = None,
    config: TaskConfig | None = None,
) -> LandRunResult | None:
    """Search every ordered pair of distinct measured altitudes for the largest triangle.

    Point A is where the pilot arrives at the leg-1 altitude, B the end of
    leg 1 and C the end of leg 2. Pairs whose path leaves ``map_bounds`` are
    discarded. Returns ``None`` with fewer than two distinct altitudes, a
    non-positive climb rate, or no surviving candidate.
    """
    cfg = config or TaskConfig()
    profile = WindProfile(wind_layers)
    altitudes = profile.altitudes_m
    if len(altitudes) < 2 or climb_rate_mps <= 0.0:
        logger.debug("Land run rejected: altitudes=%d climb_rate=%s", len(altitudes), climb_rate_mps)
        return None

    def evaluate(pair: tuple[float, float]) -> LandRunOption | None:
        return _evaluate_pair(pair[0], pair[1], pilot, pilot_alt_m, climb_rate_mps, profile, limits, map_bounds, cfg)

    options = [
        option
        for option in map_candidates(evaluate, permutations(altitudes, 2), cfg.workers)
        if option is not None
    ]
    ranked = rank(options, key=lambda o: o.triangle_area_m2, limit=cfg.max_alternatives)
    if ranked is None:
        logger.debug("Land run found no candidate inside the bounds")
        return None
    best, alternatives = ranked
    return LandRunResult(best=best, alternatives=alternatives)


def _evaluate_pair(
    leg1_alt: float,
    leg2_alt: float,
    pilot: GeoPoint,
    pilot_alt_m: float,
    climb_rate_mps: float,
    profile: WindProfile,
    limits: LandRunLimits,
    bounds: MapBounds | None,
    cfg: TaskConfig,
) -> LandRunOption | None:
    leg1_wind = profile.wind_at(leg1_alt)
    leg2_wind = profile.wind_at(leg2_alt)
    if leg1_wind.speed_mps < cfg.min_wind_speed_mps and leg2_wind.speed_mps < cfg.min_wind_speed_mps:
        return None

    leg1_budget, leg2_budget = limits.leg_budgets()
    if limits.unit == UNIT_KILOMETERS:
        leg1_max_dist, leg2_max_dist = leg1_budget, leg2_budget
        leg1_max_time = cfg.max_time_s
        if limits.mode != LIMIT_TOTAL and leg1_wind.speed_mps > cfg.min_wind_speed_mps:
            leg1_max_time = leg1_max_dist / leg1_wind.speed_mps
        leg2_max_time = cfg.max_time_s
    else:
        leg1_max_dist = leg2_max_dist = None
        leg1_max_time, leg2_max_time = leg1_budget, leg2_budget

    approach = fly_approach(pilot, pilot_alt_m, leg1_alt, climb_rate_mps, profile, cfg)
    point_a = approach.end
    if not in_bounds(bounds, point_a):
        return None

    dt = cfg.time_step_s
    sample_every = steps_per_interval(cfg.path_sample_interval_s, dt)

    # leg 1: constant altitude
    position = point_a
    path_ab = [SimulationPoint(point_a, leg1_alt, 0.0)]
    step = 0
    while step * dt < leg1_max_time:
        step += 1
        position = drift(position, leg1_wind.direction_deg, leg1_wind.speed_mps, dt)
        if not in_bounds(bounds, position):
            return None
        if leg1_max_dist is not None and great_circle_distance_m(point_a, position) >= leg1_max_dist:
            break
        if step % sample_every == 0:
            path_ab.append(SimulationPoint(position, leg1_alt, step * dt))
    point_b = position
    leg1_time = step * dt
    path_ab.append(SimulationPoint(point_b, leg1_alt, leg1_time))

    # leg 2: transition from B, then constant altitude
    leg = TransitionLeg(point_b, leg1_alt, leg2_alt, climb_rate_mps, leg2_wind, profile)
    path_bc = [SimulationPoint(point_b, leg1_alt, 0.0)]
    step = 0
    while step * dt < leg2_max_time:
        step += 1
        position = leg.advance(dt)
        if not in_bounds(bounds, position):
            return None
        if leg2_max_dist is not None and great_circle_distance_m(point_b, position) >= leg2_max_dist:
            break
        if step % sample_every == 0:
            path_bc.append(SimulationPoint(position, leg.alt_m, step * dt))
    point_c = position
    leg2_time = step * dt
    path_bc.append(SimulationPoint(point_c, leg.alt_m, leg2_time))

    return LandRunOption(
        leg1_alt_m=leg1_alt,
        leg2_alt_m=leg2_alt,
        leg1_wind=leg1_wind,
        leg2_wind=leg2_wind,
        angle_difference_deg=angle_difference_deg(leg1_wind.drift_bearing_deg, leg2_wind.drift_bearing_deg),
        triangle_area_m2=triangle_area_m2(point_a, point_b, point_c),
        leg1_distance_m=great_circle_distance_m(point_a, point_b),
        leg2_distance_m=great_circle_distance_m(point_b, point_c),
        leg1_time_s=leg1_time,
        leg2_time_s=leg2_time,
        point_a=point_a,
        point_b=point_b,
        point_c=point_c,
        path_ab=tuple(path_ab),
        path_bc=tuple(path_bc),
        approach_path=approach.path,
        approach_time_s=approach.time_s,
        total_time_s=leg1_time + leg2_time,
    )
