import pytest

from balloon_nav.atmosphere.wind import WindLayer
from balloon_nav.config import TaskConfig
from balloon_nav.core.geodesy import GeoPoint, destination_point
from balloon_nav.tasks.angle_task import LegWindow, optimize_angle_task
from balloon_nav.tasks.land_run import LandRunLimits, optimize_land_run, triangle_area_m2
from balloon_nav.tasks.legs import MapBounds, map_candidates, rank

PILOT = GeoPoint(47.0, 11.0)
TEN_MINUTES = LandRunLimits(mode="leg1+leg2", unit="min", leg1_value=10.0, leg2_value=10.0)


def test_triangle_area():
    b = destination_point(PILOT, 90.0, 1_000.0)
    c = destination_point(PILOT, 0.0, 1_000.0)
    assert triangle_area_m2(PILOT, b, c) == pytest.approx(500_000.0, rel=1e-3)
    assert triangle_area_m2(PILOT, b, b) == pytest.approx(0.0, abs=1e-6)


@pytest.mark.parametrize(
    "limits, expected",
    [
        (LandRunLimits(mode="leg1", leg1_value=5.0, leg2_value=9.0), (300.0, 300.0)),
        (LandRunLimits(mode="leg2", leg1_value=5.0, leg2_value=9.0), (540.0, 540.0)),
        (LandRunLimits(mode="leg1+leg2", leg1_value=5.0, leg2_value=9.0), (300.0, 540.0)),
        (LandRunLimits(mode="total", total_value=20.0), (600.0, 600.0)),
        (LandRunLimits(mode="leg1+leg2", unit="km", leg1_value=2.0, leg2_value=3.0), (2_000.0, 3_000.0)),
    ],
)
def test_leg_budgets(limits, expected):
    assert limits.leg_budgets() == expected


def test_limits_validate_choices():
    with pytest.raises(ValueError):
        LandRunLimits(mode="both")
    with pytest.raises(ValueError):
        LandRunLimits(unit="h")


def test_land_run_single_altitude_is_rejected():
    layers = [WindLayer(500.0, 270.0, 5.0), WindLayer(500.0, 180.0, 5.0)]
    assert optimize_land_run(PILOT, 500.0, 5.0, layers, TEN_MINUTES) is None


def test_land_run_rejects_non_positive_rate(two_layer_profile):
    assert optimize_land_run(PILOT, 500.0, 0.0, two_layer_profile, TEN_MINUTES) is None


def test_land_run_two_layers(two_layer_profile):
    result = optimize_land_run(PILOT, 500.0, 5.0, two_layer_profile, TEN_MINUTES)

    assert result is not None
    best = result.best
    assert len(result.alternatives) == 1
    assert best.triangle_area_m2 >= result.alternatives[0].triangle_area_m2
    assert best.triangle_area_m2 > 1_000_000.0
    assert best.angle_difference_deg == pytest.approx(90.0)
    assert {best.leg1_alt_m, best.leg2_alt_m} == {500.0, 1500.0}
    assert best.leg1_time_s == pytest.approx(600.0)
    assert best.leg2_time_s == pytest.approx(600.0)
    assert best.total_time_s == pytest.approx(1_200.0)
    assert best.leg1_distance_m == pytest.approx(3_000.0, rel=1e-3)
    assert best.path_ab[0].position == best.point_a
    assert best.path_bc[-1].position == best.point_c


def test_land_run_distance_limits(two_layer_profile):
    limits = LandRunLimits(mode="leg1+leg2", unit="km", leg1_value=1.0, leg2_value=1.0)
    result = optimize_land_run(PILOT, 500.0, 5.0, two_layer_profile, limits)

    assert result.best.leg1_distance_m == pytest.approx(1_000.0, abs=10.0)
    assert result.best.leg2_distance_m == pytest.approx(1_000.0, abs=10.0)


def test_land_run_bounds_discard_candidates(two_layer_profile):
    bounds = MapBounds(north=48.0, south=46.0, east=11.001, west=10.0)
    assert optimize_land_run(PILOT, 500.0, 5.0, two_layer_profile, TEN_MINUTES, map_bounds=bounds) is None


def test_land_run_parallel_matches_serial(two_layer_profile):
    serial = optimize_land_run(PILOT, 500.0, 5.0, two_layer_profile, TEN_MINUTES)
    parallel = optimize_land_run(PILOT, 500.0, 5.0, two_layer_profile, TEN_MINUTES, config=TaskConfig(workers=4))
    assert parallel == serial


def test_leg_window_validates_kind():
    with pytest.raises(ValueError):
        LegWindow(kind="speed", minimum=0.0, maximum=1.0)


def test_angle_task_distance_window(two_layer_profile):
    window = LegWindow(kind="distance", minimum=1_000.0, maximum=2_000.0)
    result = optimize_angle_task(PILOT, 500.0, 5.0, two_layer_profile, 90.0, window)

    assert result is not None
    best = result.best
    assert best.achieved_angle_deg == pytest.approx(90.0, abs=1.0)
    assert best.leg2_alt_m == 1500.0
    assert 1_000.0 <= best.distance_ab_m <= 2_000.0
    assert best.distance_ab_m == pytest.approx(2_000.0, abs=10.0)
    assert all(best.achieved_angle_deg >= alt.achieved_angle_deg for alt in result.alternatives)


def test_angle_task_time_window(two_layer_profile):
    window = LegWindow(kind="time", minimum=60.0, maximum=600.0)
    result = optimize_angle_task(PILOT, 500.0, 5.0, two_layer_profile, 90.0, window)

    best = result.best
    assert best.achieved_angle_deg == pytest.approx(90.0, abs=1.0)
    assert 60.0 <= best.leg2_time_s <= 600.0
    assert best.path_leg2[-1].position == best.point_b
    assert all(p.time_s <= best.leg2_time_s for p in best.path_leg2)


def test_angle_task_fixed_point_a(two_layer_profile):
    fixed = GeoPoint(47.01, 11.01)
    window = LegWindow(kind="distance", minimum=500.0, maximum=1_000.0)
    result = optimize_angle_task(PILOT, 500.0, 5.0, two_layer_profile, 0.0, window, fixed_point_a=fixed)

    assert result.best.point_a == fixed
    assert result.best.approach_time_s == 0.0
    assert result.best.approach_path == ()


def test_angle_task_rejections(two_layer_profile):
    window = LegWindow(kind="distance", minimum=1_000.0, maximum=2_000.0)
    assert optimize_angle_task(PILOT, 500.0, 5.0, two_layer_profile[:1], 90.0, window) is None
    assert optimize_angle_task(PILOT, 500.0, 0.0, two_layer_profile, 90.0, window) is None

    calm = [WindLayer(500.0, 0.0, 0.0), WindLayer(1500.0, 0.0, 0.0)]
    assert optimize_angle_task(PILOT, 500.0, 5.0, calm, 90.0, window) is None


def test_map_candidates_preserves_order():
    assert map_candidates(lambda x: x * 2, range(5), workers=0) == [0, 2, 4, 6, 8]
    assert map_candidates(lambda x: x * 2, range(5), workers=3) == [0, 2, 4, 6, 8]


def test_rank():
    assert rank([], key=lambda x: x, limit=3) is None
    assert rank([1, 5, 3, 4], key=lambda x: x, limit=2) == (5, (4, 3))
