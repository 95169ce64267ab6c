"""Climb/sink point search towards a goal."""

from __future__ import annotations

import logging
from typing import Iterable

from ..atmosphere.wind import WindLayer, WindProfile
from ..config import ClimbConfig, steps_per_interval
from ..core.geodesy import GeoPoint, drift, great_circle_distance_m
from .outputs import ClimbPointResult, SimulationPoint

logger = logging.getLogger(__name__)


def find_climb_point(
    start: GeoPoint,
    start_alt_m: float,
    climb_rate_mps: float,
    min_altitude_change_m: float,
    min_distance_m: float,
    wind_layers: Iterable[WindLayer],
    goal: GeoPoint,
    exact_mode: bool = False,
    lead_time_s: float = 0.0,
    ramp_up_s: float | None = None,
    config: ClimbConfig | None = None,
) -> ClimbPointResult | None:
    """Find where a constant-rate climb (positive rate) or sink passes closest to ``goal``.

    The flight drifts at the current altitude for ``lead_time_s``, then the
    vertical rate ramps linearly from zero to ``climb_rate_mps`` over
    ``ramp_up_s`` and is held. Only points at least ``min_altitude_change_m``
    and ``min_distance_m`` away from the climb start qualify. In
    ``exact_mode`` the first qualifying point is returned; otherwise the one
    nearest the goal, stopping once the distance grows past
    ``divergence_factor`` times the best so far.
    """
    cfg = config or ClimbConfig()
    ramp_s = cfg.ramp_up_s if ramp_up_s is None else ramp_up_s
    profile = WindProfile(wind_layers)
    if not profile or climb_rate_mps == 0.0:
        logger.debug("Climb point rejected: layers=%d climb_rate=%s", len(profile), climb_rate_mps)
        return None

    dt = cfg.time_step_s
    sample_every = steps_per_interval(cfg.path_sample_interval_s, dt)

    position = start
    alt = float(start_alt_m)
    step = 0
    path = [SimulationPoint(position, alt, 0.0)]

    lead_steps = int(round(lead_time_s / dt))
    for _ in range(lead_steps):
        step += 1
        wind = profile.wind_at(alt)
        position = drift(position, wind.direction_deg, wind.speed_mps, dt)
        if step % sample_every == 0:
            path.append(SimulationPoint(position, alt, step * dt))

    climb_start = position
    climb_start_alt = alt
    climb_time = 0.0

    best: SimulationPoint | None = None
    best_dist = float("inf")
    best_climb_time = 0.0
    best_path_len = 0

    while step * dt < cfg.max_time_s:
        step += 1
        climb_time += dt
        elapsed = step * dt

        if ramp_s > 0.0 and climb_time <= ramp_s:
            rate = climb_rate_mps * (climb_time / ramp_s)
        else:
            rate = climb_rate_mps
        alt += rate * dt

        if alt < cfg.min_altitude_m or alt > cfg.max_altitude_m:
            break

        wind = profile.wind_at(alt)
        position = drift(position, wind.direction_deg, wind.speed_mps, dt)
        sampled = step % sample_every == 0
        if sampled:
            path.append(SimulationPoint(position, alt, elapsed))

        qualifies = (
            abs(alt - climb_start_alt) >= min_altitude_change_m
            and great_circle_distance_m(climb_start, position) >= min_distance_m
        )
        if not qualifies:
            continue

        dist_to_goal = great_circle_distance_m(position, goal)
        if exact_mode:
            best = SimulationPoint(position, alt, elapsed)
            best_dist = dist_to_goal
            best_climb_time = climb_time
            if not sampled:
                path.append(best)
            best_path_len = len(path)
            break

        if dist_to_goal < best_dist:
            best = SimulationPoint(position, alt, elapsed)
            best_dist = dist_to_goal
            best_climb_time = climb_time
            if not sampled:
                path.append(best)
            best_path_len = len(path)
        elif best is not None and dist_to_goal > best_dist * cfg.divergence_factor:
            break

    if best is None:
        logger.debug("Climb point search found no qualifying point")
        return None

    return ClimbPointResult(
        best_point=best,
        distance_to_goal_m=best_dist,
        altitude_change_m=best.alt_m - climb_start_alt,
        climb_time_s=best_climb_time,
        lead_time_s=lead_steps * dt,
        total_time_s=best.time_s,
        path=tuple(path[:best_path_len]),
    )
