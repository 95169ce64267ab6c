import pytest

from balloon_nav.atmosphere.wind import WindLayer, WindProfile
from balloon_nav.config import ClimbConfig
from balloon_nav.core.geodesy import GeoPoint, destination_point, great_circle_distance_m
from balloon_nav.simulation.climb import find_climb_point

START = GeoPoint(47.0, 11.0)
EASTWARD = [WindLayer(alt_m=0.0, direction_deg=270.0, speed_mps=10.0)]
GOAL = destination_point(START, 90.0, 3_000.0)


def test_finds_point_nearest_goal():
    result = find_climb_point(START, 500.0, 2.0, 0.0, 0.0, EASTWARD, GOAL)

    assert result is not None
    assert result.distance_to_goal_m < 10.0
    assert result.best_point.time_s == pytest.approx(300.0, abs=2.0)
    assert result.altitude_change_m > 0.0
    assert result.path[-1] == result.best_point


def test_exact_mode_takes_first_qualifying_point():
    result = find_climb_point(START, 500.0, 2.0, 0.0, 1_000.0, EASTWARD, GOAL, exact_mode=True)

    assert great_circle_distance_m(START, result.best_point.position) >= 1_000.0
    assert result.best_point.time_s == pytest.approx(100.0, abs=1.0)
    assert result.distance_to_goal_m == pytest.approx(2_000.0, abs=15.0)


def test_minimum_altitude_change_with_ramp():
    result = find_climb_point(START, 500.0, 2.0, 100.0, 0.0, EASTWARD, GOAL, exact_mode=True)

    assert 100.0 <= result.altitude_change_m < 102.0
    # ramp covers 31 m in 30 s, the remaining 69 m take ~35 s at full rate
    assert result.climb_time_s == pytest.approx(65.0, abs=1.0)


def test_lead_time_drifts_before_climbing():
    result = find_climb_point(START, 500.0, 2.0, 10.0, 0.0, EASTWARD, GOAL, exact_mode=True, lead_time_s=60.0)

    assert result.lead_time_s == pytest.approx(60.0)
    assert result.best_point.time_s > 60.0
    assert all(p.alt_m == 500.0 for p in result.path if p.time_s <= 60.0)


def test_sink_stops_at_floor():
    far_goal = destination_point(START, 0.0, 50_000.0)
    cfg = ClimbConfig(min_altitude_m=0.0)
    result = find_climb_point(START, 100.0, -2.0, 0.0, 0.0, EASTWARD, far_goal, ramp_up_s=0.0, config=cfg)

    assert result is not None
    assert result.best_point.alt_m >= 0.0
    assert result.altitude_change_m < 0.0


def count_wind_lookups(monkeypatch):
    lookups = []
    resolve = WindProfile.wind_at

    def counting(self, alt_m):
        lookups.append(alt_m)
        return resolve(self, alt_m)

    monkeypatch.setattr(WindProfile, "wind_at", counting)
    return lookups


def test_search_stops_once_track_leaves_goal(monkeypatch):
    lookups = count_wind_lookups(monkeypatch)
    result = find_climb_point(START, 500.0, 2.0, 0.0, 0.0, EASTWARD, GOAL)

    # goal is passed at ~300 s, the next step is already 1.5x further away
    assert result.best_point.time_s == pytest.approx(300.0, abs=2.0)
    assert len(lookups) < 320


def test_search_runs_to_cap_without_divergence(monkeypatch):
    lookups = count_wind_lookups(monkeypatch)
    cfg = ClimbConfig(divergence_factor=1e9)
    result = find_climb_point(START, 500.0, 2.0, 0.0, 0.0, EASTWARD, GOAL, config=cfg)

    assert result.best_point.time_s == pytest.approx(300.0, abs=2.0)
    assert len(lookups) == 3_600


def test_unreachable_distance_gives_no_result():
    light_air = [WindLayer(alt_m=0.0, direction_deg=270.0, speed_mps=1.0)]
    assert find_climb_point(START, 500.0, 2.0, 0.0, 10_000.0, light_air, GOAL) is None


def test_altitude_ceiling_before_required_change_gives_no_result():
    cfg = ClimbConfig(max_altitude_m=600.0)
    assert find_climb_point(START, 500.0, 2.0, 200.0, 0.0, EASTWARD, GOAL, config=cfg) is None


@pytest.mark.parametrize("rate, layers", [(0.0, EASTWARD), (2.0, [])])
def test_rejects_invalid_inputs(rate, layers):
    assert find_climb_point(START, 500.0, rate, 0.0, 0.0, layers, GOAL) is None
