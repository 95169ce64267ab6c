"""Command-line entrypoint for balloon navigation predictions."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from .atmosphere.wind import SPEED_UNIT_CHOICES, SPEED_UNITS_MPS, load_wind_profile_json
from .config import NavigatorConfig, load_config
from .core.constants import M_PER_FT
from .core.geodesy import GeoPoint
from .simulation.climb import find_climb_point
from .simulation.landing import predict_landing
from .simulation.marker import predict_marker_drop
from .simulation.outputs import save_json_summary
from .tasks.angle_task import WINDOW_CHOICES, LegWindow, optimize_angle_task
from .tasks.land_run import LIMIT_MODE_CHOICES, LIMIT_UNIT_CHOICES, LandRunLimits, optimize_land_run
from .tasks.legs import MapBounds
from .terrain.elevation import ElevationService


def _add_position_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--lat", type=float, required=True, help="Start latitude (deg)")
    parser.add_argument("--lon", type=float, required=True, help="Start longitude (deg)")
    parser.add_argument("--alt", type=float, required=True, help="Start altitude MSL (m)")
    parser.add_argument("--wind", required=True, help="Path to wind profile JSON")
    parser.add_argument("--wind-units", choices=SPEED_UNIT_CHOICES, default=SPEED_UNITS_MPS)
    parser.add_argument("--output", default=None, help="Write the JSON summary here")


def _add_bounds_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--bounds",
        type=float,
        nargs=4,
        metavar=("NORTH", "SOUTH", "EAST", "WEST"),
        default=None,
        help="Discard candidates leaving this rectangle",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Balloon trajectory prediction and task optimization")
    parser.add_argument("--config", default=None, help="Path to config JSON")
    parser.add_argument("--hgt-dir", default=None, help="HGT tile directory override")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    landing = sub.add_parser("landing", help="Predict the landing point for a constant sink rate")
    _add_position_args(landing)
    landing.add_argument("--sink-rate", type=float, required=True, help="Sink rate (m/s, positive)")

    marker = sub.add_parser("marker-drop", help="Predict where a dropped marker lands")
    _add_position_args(marker)
    marker.add_argument("--terminal-velocity", type=float, default=10.0, help="Marker terminal velocity (m/s)")
    marker.add_argument("--balloon-speed-kmh", type=float, default=0.0)
    marker.add_argument("--balloon-heading", type=float, default=0.0)

    climb = sub.add_parser("climb-point", help="Find the best climb/sink point towards a goal")
    _add_position_args(climb)
    climb.add_argument("--rate", type=float, required=True, help="Climb (+) or sink (-) rate in m/s")
    climb.add_argument("--goal-lat", type=float, required=True)
    climb.add_argument("--goal-lon", type=float, required=True)
    climb.add_argument("--min-alt-change-ft", type=float, default=0.0)
    climb.add_argument("--min-distance", type=float, default=0.0, help="Minimum horizontal distance (m)")
    climb.add_argument("--lead-time", type=float, default=0.0, help="Drift time before climbing (s)")
    climb.add_argument("--ramp-up", type=float, default=None, help="Rate ramp-up time (s)")
    climb.add_argument("--exact", action="store_true", help="Return the first qualifying point")

    land_run = sub.add_parser("land-run", help="Optimize a Land Run triangle")
    _add_position_args(land_run)
    _add_bounds_arg(land_run)
    land_run.add_argument("--rate", type=float, required=True, help="Climb/sink rate (m/s, positive)")
    land_run.add_argument("--mode", choices=LIMIT_MODE_CHOICES, default="leg1+leg2")
    land_run.add_argument("--unit", choices=LIMIT_UNIT_CHOICES, default="min")
    land_run.add_argument("--leg1", type=float, default=0.0)
    land_run.add_argument("--leg2", type=float, default=0.0)
    land_run.add_argument("--total", type=float, default=0.0)

    angle = sub.add_parser("angle-task", help="Optimize an Angle Task")
    _add_position_args(angle)
    _add_bounds_arg(angle)
    angle.add_argument("--rate", type=float, required=True, help="Climb/sink rate (m/s, positive)")
    angle.add_argument("--set-direction", type=float, required=True, help="Set direction (deg)")
    angle.add_argument("--window", choices=WINDOW_CHOICES, default="distance")
    angle.add_argument("--min", dest="window_min", type=float, required=True, help="Window minimum (m or s)")
    angle.add_argument("--max", dest="window_max", type=float, required=True, help="Window maximum (m or s)")
    angle.add_argument("--point-a", type=float, nargs=2, metavar=("LAT", "LON"), default=None)

    elevation = sub.add_parser("elevation", help="Query or manage HGT elevation tiles")
    elevation_sub = elevation.add_subparsers(dest="elevation_command", required=True)
    query = elevation_sub.add_parser("query", help="Ground elevation at a point")
    query.add_argument("--lat", type=float, required=True)
    query.add_argument("--lon", type=float, required=True)
    imp = elevation_sub.add_parser("import", help="Import HGT tiles from zip archives")
    imp.add_argument("archives", nargs="+")
    elevation_sub.add_parser("status", help="List available tiles")
    return parser


def _bounds(values) -> MapBounds | None:
    if values is None:
        return None
    north, south, east, west = values
    return MapBounds(north=north, south=south, east=east, west=west)


def _no_result() -> int:
    print("[warn] no result for the given inputs")
    return 1


def _emit(result, args, summary: str) -> int:
    print(f"[done] {summary}")
    if args.output is not None:
        path = save_json_summary(result, args.output)
        print(f"[done] summary: {path}")
    return 0


def _run_elevation(args, service: ElevationService) -> int:
    if args.elevation_command == "query":
        value = service.get_elevation(args.lat, args.lon)
        if value is None:
            print(f"[warn] no elevation data at {args.lat}, {args.lon}")
            return 1
        print(f"[done] elevation: {value:.0f} m")
        return 0

    if args.elevation_command == "import":
        status = 0
        for archive in args.archives:
            report = service.import_archive(archive)
            print(f"[done] {archive}: imported {len(report.imported)} tiles")
            for message in report.errors:
                print(f"[warn] {message}")
                status = 1
        return status

    tiles = service.available_tiles
    print(f"[done] {len(tiles)} tiles in {service.storage_dir}")
    for key in tiles:
        print(f"  - {key}")
    return 0


def _run(args, cfg: NavigatorConfig) -> int:
    service = ElevationService.from_config(cfg.elevation)
    if args.command == "elevation":
        return _run_elevation(args, service)

    layers = load_wind_profile_json(args.wind, units=args.wind_units)
    start = GeoPoint(args.lat, args.lon)

    if args.command == "landing":
        result = asyncio.run(
            predict_landing(start, args.alt, args.sink_rate, layers, service.get_elevation, cfg.landing)
        )
        if result is None:
            return _no_result()
        summary = (
            f"landing after {result.total_time_s:.0f} s, {result.total_distance_m:.0f} m "
            f"at {result.landing_point.lat_deg:.6f}, {result.landing_point.lon_deg:.6f}"
        )
        return _emit(result, args, summary)

    if args.command == "marker-drop":
        result = asyncio.run(
            predict_marker_drop(
                start,
                args.alt,
                args.terminal_velocity,
                layers,
                service.get_elevation,
                balloon_speed_kmh=args.balloon_speed_kmh,
                balloon_heading_deg=args.balloon_heading,
                config=cfg.marker,
            )
        )
        if result is None:
            return _no_result()
        summary = (
            f"impact after {result.time_to_impact_s:.1f} s, drift {result.total_drift_m:.0f} m "
            f"at {result.impact_point.lat_deg:.6f}, {result.impact_point.lon_deg:.6f}"
        )
        return _emit(result, args, summary)

    if args.command == "climb-point":
        result = find_climb_point(
            start,
            args.alt,
            args.rate,
            args.min_alt_change_ft * M_PER_FT,
            args.min_distance,
            layers,
            GeoPoint(args.goal_lat, args.goal_lon),
            exact_mode=args.exact,
            lead_time_s=args.lead_time,
            ramp_up_s=args.ramp_up,
            config=cfg.climb,
        )
        if result is None:
            return _no_result()
        summary = (
            f"best point {result.distance_to_goal_m:.0f} m from goal after {result.total_time_s:.0f} s "
            f"at {result.best_point.alt_m:.0f} m"
        )
        return _emit(result, args, summary)

    if args.command == "land-run":
        limits = LandRunLimits(
            mode=args.mode,
            unit=args.unit,
            leg1_value=args.leg1,
            leg2_value=args.leg2,
            total_value=args.total,
        )
        result = optimize_land_run(start, args.alt, args.rate, layers, limits, _bounds(args.bounds), cfg.tasks)
        if result is None:
            return _no_result()
        summary = (
            f"best area {result.best.triangle_area_m2 / 1e6:.3f} km2 "
            f"with legs at {result.best.leg1_alt_m:.0f} m / {result.best.leg2_alt_m:.0f} m"
        )
        return _emit(result, args, summary)

    window = LegWindow(kind=args.window, minimum=args.window_min, maximum=args.window_max)
    fixed_a = GeoPoint(*args.point_a) if args.point_a is not None else None
    result = optimize_angle_task(
        start,
        args.alt,
        args.rate,
        layers,
        args.set_direction,
        window,
        map_bounds=_bounds(args.bounds),
        fixed_point_a=fixed_a,
        config=cfg.tasks,
    )
    if result is None:
        return _no_result()
    summary = (
        f"best angle {result.best.achieved_angle_deg:.0f} deg "
        f"with legs at {result.best.leg1_alt_m:.0f} m / {result.best.leg2_alt_m:.0f} m"
    )
    return _emit(result, args, summary)


def main(argv=None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        cfg = load_config(args.config)
        if args.hgt_dir is not None:
            cfg.elevation.storage_dir = args.hgt_dir
        return _run(args, cfg)
    except (FileNotFoundError, ValueError) as exc:
        parser.error(str(exc))


if __name__ == "__main__":
    sys.exit(main())
