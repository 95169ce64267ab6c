import math
from datetime import datetime, timedelta, timezone

import pytest

from balloon_nav.core.geodesy import (
    GeoPoint,
    destination_point,
    drift,
    great_circle_distance_m,
    initial_bearing_deg,
    normalize_lon_deg,
)
from balloon_nav.core.navigation import (
    angle_difference_deg,
    distance_3d_m,
    drop_angle,
    elbow_angle_deg,
    eta_seconds,
    is_point_in_circle,
    transit_point,
    wind_from_fixes,
)
from balloon_nav.terrain.hgt import tile_key

ORIGIN = GeoPoint(47.5, 11.5)


def test_one_degree_of_latitude():
    d = great_circle_distance_m(GeoPoint(0.0, 0.0), GeoPoint(1.0, 0.0))
    assert d == pytest.approx(6_371_000.0 * math.pi / 180.0, rel=1e-9)


def test_distance_is_symmetric_and_zero_on_self():
    other = GeoPoint(48.1, 12.3)
    assert great_circle_distance_m(ORIGIN, ORIGIN) == 0.0
    assert great_circle_distance_m(ORIGIN, other) == pytest.approx(great_circle_distance_m(other, ORIGIN))


@pytest.mark.parametrize(
    "target, expected",
    [
        (GeoPoint(48.5, 11.5), 0.0),
        (GeoPoint(47.5, 12.5), 90.0),
        (GeoPoint(46.5, 11.5), 180.0),
    ],
)
def test_cardinal_bearings(target, expected):
    assert initial_bearing_deg(ORIGIN, target) == pytest.approx(expected, abs=0.5)


def test_westward_bearing_is_normalized():
    brg = initial_bearing_deg(ORIGIN, GeoPoint(47.5, 10.5))
    assert 0.0 <= brg < 360.0
    assert brg == pytest.approx(270.0, abs=0.5)


@pytest.mark.parametrize("bearing", [0.0, 45.0, 137.0, 270.0, 359.0])
@pytest.mark.parametrize("distance", [10.0, 2_500.0, 80_000.0])
def test_destination_round_trip(bearing, distance):
    dest = destination_point(ORIGIN, bearing, distance)
    assert great_circle_distance_m(ORIGIN, dest) == pytest.approx(distance, rel=1e-6)
    assert angle_difference_deg(initial_bearing_deg(ORIGIN, dest), bearing) < 0.1


def test_destination_wraps_across_antimeridian():
    east = destination_point(GeoPoint(47.5, 179.999), 90.0, 1_000.0)
    assert -180.0 <= east.lon_deg < -179.98
    assert tile_key(east.lat_deg, east.lon_deg) == "N47W180"
    assert great_circle_distance_m(GeoPoint(47.5, 179.999), east) == pytest.approx(1_000.0, rel=1e-6)

    west = destination_point(GeoPoint(-10.0, -179.999), 270.0, 1_000.0)
    assert 179.98 < west.lon_deg < 180.0
    assert tile_key(west.lat_deg, west.lon_deg) == "S10E179"


@pytest.mark.parametrize(
    "lon, expected",
    [(0.0, 0.0), (180.0, -180.0), (-180.0, -180.0), (190.0, -170.0), (-190.0, 170.0), (540.0, -180.0)],
)
def test_normalize_lon(lon, expected):
    assert normalize_lon_deg(lon) == pytest.approx(expected)


def test_drift_moves_opposite_to_wind_origin():
    moved = drift(ORIGIN, wind_from_deg=270.0, wind_speed_mps=10.0, dt_s=60.0)
    assert great_circle_distance_m(ORIGIN, moved) == pytest.approx(600.0, rel=1e-6)
    assert initial_bearing_deg(ORIGIN, moved) == pytest.approx(90.0, abs=0.1)


def test_angle_difference_wraps():
    assert angle_difference_deg(350.0, 10.0) == pytest.approx(20.0)
    assert angle_difference_deg(90.0, 270.0) == pytest.approx(180.0)
    assert angle_difference_deg(0.0, 0.0) == 0.0


def test_distance_3d_adds_altitude():
    other = destination_point(ORIGIN, 0.0, 300.0)
    assert distance_3d_m(ORIGIN, 0.0, other, 400.0) == pytest.approx(500.0, rel=1e-6)


def test_transit_point_on_crossing_track():
    target = destination_point(ORIGIN, 0.0, 1_000.0)
    result = transit_point(ORIGIN, 45.0, target)
    assert result.miss_distance_m == pytest.approx(1_000.0 * math.sin(math.radians(45.0)), rel=1e-3)
    assert great_circle_distance_m(result.point, target) == pytest.approx(result.miss_distance_m, rel=1e-3)


def test_elbow_angle_right_angle():
    north = destination_point(ORIGIN, 0.0, 1_000.0)
    east = destination_point(ORIGIN, 90.0, 1_000.0)
    assert elbow_angle_deg(north, ORIGIN, east) == pytest.approx(90.0, abs=0.1)


def test_point_in_circle():
    inside = destination_point(ORIGIN, 10.0, 99.0)
    outside = destination_point(ORIGIN, 10.0, 101.0)
    assert is_point_in_circle(inside, ORIGIN, 100.0)
    assert not is_point_in_circle(outside, ORIGIN, 100.0)


def test_eta():
    target = destination_point(ORIGIN, 90.0, 1_000.0)
    assert eta_seconds(ORIGIN, target, 10.0, 90.0) == pytest.approx(100.0, rel=1e-3)
    assert eta_seconds(ORIGIN, target, 10.0, 270.0) is None
    assert eta_seconds(ORIGIN, target, 0.2, 90.0) is None


def test_wind_from_fixes():
    t0 = datetime(2026, 5, 1, 6, 0, tzinfo=timezone.utc)
    later = destination_point(ORIGIN, 90.0, 600.0)
    direction, speed = wind_from_fixes(ORIGIN, t0, later, t0 + timedelta(minutes=1))
    assert direction == pytest.approx(270.0, abs=0.1)
    assert speed == pytest.approx(10.0, rel=1e-6)
    assert wind_from_fixes(ORIGIN, t0, later, t0) == (0.0, 0.0)


def test_drop_angle():
    result = drop_angle(altitude_m=100.0, ground_speed_mps=5.0)
    fall_time = math.sqrt(200.0 / 9.81)
    assert result.lead_distance_m == pytest.approx(5.0 * fall_time)
    assert result.angle_deg == pytest.approx(math.degrees(math.atan(100.0 / (5.0 * fall_time))))
    assert drop_angle(100.0, 0.0).angle_deg == 90.0
