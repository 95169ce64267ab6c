"""Balloon descent simulator: where does the balloon touch down?"""

from __future__ import annotations

import logging
from typing import Iterable

from ..atmosphere.wind import WindLayer, WindProfile
from ..config import LandingConfig, steps_per_interval
from ..core.geodesy import GeoPoint, drift, great_circle_distance_m
from .common import ElevationLookup, query_elevation
from .outputs import LandingPrediction, SimulationPoint

logger = logging.getLogger(__name__)


async def predict_landing(
    start: GeoPoint,
    start_alt_m: float,
    sink_rate_mps: float,
    wind_layers: Iterable[WindLayer],
    get_elevation: ElevationLookup,
    config: LandingConfig | None = None,
) -> LandingPrediction | None:
    """Descend at a constant sink rate through the wind profile until ground contact.

    Ground elevation is fetched once at the start, every
    ``elevation_check_interval_steps`` steps, and once more at the landing
    point; in between the last known value is used. Unresolved elevations
    fall back to the previous value (0 m if none was ever resolved).

    Returns ``None`` for an empty wind profile or a non-positive sink rate or
    start altitude. If the ground is not reached within ``max_time_s`` the
    in-progress state is returned with ``landed=False``.
    """
    cfg = config or LandingConfig()
    profile = WindProfile(wind_layers)
    if not profile or sink_rate_mps <= 0.0 or start_alt_m <= 0.0:
        logger.debug(
            "Landing prediction rejected: layers=%d sink_rate=%s start_alt=%s",
            len(profile),
            sink_rate_mps,
            start_alt_m,
        )
        return None

    ground_m = await query_elevation(get_elevation, start)
    last_ground_m = 0.0 if ground_m is None else ground_m

    dt = cfg.time_step_s
    sample_every = steps_per_interval(cfg.path_sample_interval_s, dt)
    check_every = max(1, int(cfg.elevation_check_interval_steps))

    position = start
    alt = float(start_alt_m)
    elapsed = 0.0
    step = 0
    path = [SimulationPoint(position, alt, 0.0)]

    while elapsed < cfg.max_time_s:
        step += 1
        elapsed = step * dt
        alt -= sink_rate_mps * dt

        wind = profile.wind_at(alt)
        position = drift(position, wind.direction_deg, wind.speed_mps, dt)

        if step % sample_every == 0:
            path.append(SimulationPoint(position, max(0.0, alt), elapsed))

        if step % check_every == 0:
            ground_m = await query_elevation(get_elevation, position)
            if ground_m is not None:
                last_ground_m = ground_m

        if alt <= last_ground_m:
            ground_m = await query_elevation(get_elevation, position)
            if ground_m is not None:
                last_ground_m = ground_m

            landing = SimulationPoint(position, last_ground_m, elapsed)
            path.append(landing)
            return LandingPrediction(
                path=tuple(path),
                landing_point=landing,
                ground_elevation_m=last_ground_m,
                total_time_s=elapsed,
                total_distance_m=great_circle_distance_m(start, position),
            )

    logger.debug("Landing prediction hit the %.0f s cap at %.0f m", cfg.max_time_s, alt)
    final = SimulationPoint(position, alt, elapsed)
    path.append(final)
    return LandingPrediction(
        path=tuple(path),
        landing_point=final,
        ground_elevation_m=last_ground_m,
        total_time_s=elapsed,
        total_distance_m=great_circle_distance_m(start, position),
        landed=False,
    )
