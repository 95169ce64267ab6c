"""Marker drop physics: quadratic drag falling body carried by the wind."""

from __future__ import annotations

import logging
import math
from typing import Iterable

from ..atmosphere.wind import WindLayer, WindProfile
from ..config import MarkerConfig, steps_per_interval
from ..core.constants import KMH_PER_MPS
from ..core.geodesy import GeoPoint, destination_point, great_circle_distance_m, normalize_bearing_deg
from .common import ElevationLookup, query_elevation
from .outputs import MarkerDropPrediction, SimulationPoint

logger = logging.getLogger(__name__)

_MIN_SPEED_MPS = 1e-3


async def predict_marker_drop(
    start: GeoPoint,
    start_alt_m: float,
    terminal_velocity_mps: float,
    wind_layers: Iterable[WindLayer],
    get_elevation: ElevationLookup,
    balloon_speed_kmh: float = 0.0,
    balloon_heading_deg: float = 0.0,
    config: MarkerConfig | None = None,
) -> MarkerDropPrediction | None:
    """Predict where a dropped marker hits the ground.

    The marker leaves with the balloon's horizontal velocity and is pulled
    towards the local wind velocity by quadratic drag in each horizontal
    axis; vertically it accelerates under gravity against drag, capped at
    ``terminal_velocity_mps``. Ground contact is tested against the elevation
    sampled at release; one final lookup at impact reports the ground height.
    """
    cfg = config or MarkerConfig()
    profile = WindProfile(wind_layers)
    if not profile or terminal_velocity_mps <= 0.0 or start_alt_m <= 0.0:
        logger.debug(
            "Marker drop rejected: layers=%d terminal_velocity=%s start_alt=%s",
            len(profile),
            terminal_velocity_mps,
            start_alt_m,
        )
        return None

    ground_m = await query_elevation(get_elevation, start)
    release_ground_m = 0.0 if ground_m is None else ground_m
    logger.debug(
        "Marker drop: start_alt=%.0f m ground=%.0f m terminal=%.1f m/s balloon=%.1f km/h @ %.0f deg layers=%d",
        start_alt_m,
        release_ground_m,
        terminal_velocity_mps,
        balloon_speed_kmh,
        balloon_heading_deg,
        len(profile),
    )

    dt = cfg.time_step_s
    drag_per_mass = cfg.drag_factor / cfg.mass_kg
    sample_every = steps_per_interval(cfg.path_sample_interval_s, dt)

    position = start
    alt = float(start_alt_m)
    elapsed = 0.0
    step = 0
    path = [SimulationPoint(position, alt, 0.0)]

    v_down = 0.0
    heading = math.radians(balloon_heading_deg)
    balloon_speed_mps = balloon_speed_kmh / KMH_PER_MPS
    v_east = balloon_speed_mps * math.sin(heading)
    v_north = balloon_speed_mps * math.cos(heading)

    while elapsed < cfg.max_time_s:
        step += 1
        elapsed = step * dt

        a_down = cfg.gravity_mps2 - drag_per_mass * v_down * v_down
        v_down = min(v_down + a_down * dt, terminal_velocity_mps)
        alt -= v_down * dt

        wind = profile.wind_at(alt)
        downwind = math.radians(wind.drift_bearing_deg)
        rel_east = wind.speed_mps * math.sin(downwind) - v_east
        rel_north = wind.speed_mps * math.cos(downwind) - v_north
        rel_speed = math.hypot(rel_east, rel_north)
        if rel_speed > _MIN_SPEED_MPS:
            a_h = drag_per_mass * rel_speed * rel_speed
            v_east += a_h * (rel_east / rel_speed) * dt
            v_north += a_h * (rel_north / rel_speed) * dt

        h_speed = math.hypot(v_east, v_north)
        if h_speed > _MIN_SPEED_MPS:
            bearing = normalize_bearing_deg(math.degrees(math.atan2(v_east, v_north)))
            position = destination_point(position, bearing, h_speed * dt)

        if step % sample_every == 0:
            path.append(SimulationPoint(position, max(0.0, alt), elapsed))

        if alt <= release_ground_m:
            ground_m = await query_elevation(get_elevation, position)
            impact_ground_m = release_ground_m if ground_m is None else ground_m
            logger.debug(
                "Marker impact after %d steps, %.1f s, ground=%.0f m, v_down=%.1f m/s",
                step,
                elapsed,
                impact_ground_m,
                v_down,
            )
            impact = SimulationPoint(position, impact_ground_m, elapsed)
            path.append(impact)
            return MarkerDropPrediction(
                path=tuple(path),
                impact_point=impact,
                time_to_impact_s=elapsed,
                ground_elevation_m=impact_ground_m,
                total_drift_m=great_circle_distance_m(start, position),
            )

    logger.debug("Marker drop timed out after %.0f s at %.0f m", elapsed, alt)
    final = SimulationPoint(position, alt, elapsed)
    path.append(final)
    return MarkerDropPrediction(
        path=tuple(path),
        impact_point=final,
        time_to_impact_s=elapsed,
        ground_elevation_m=release_ground_m,
        total_drift_m=great_circle_distance_m(start, position),
        landed=False,
    )
