import numpy as np
import pytest

from geometry import TrackGeometry, Footprint, POWER_SOURCE_FOOTPRINT, SWITCH_GAP_FOOTPRINT


@pytest.fixture
def geometry():
    return TrackGeometry()


def test_perimeter(geometry):
    assert geometry.perimeter == 2040.0


def test_locate_is_periodic(geometry):
    assert geometry.locate(0.0) == geometry.locate(geometry.perimeter)
    assert geometry.locate(100.0) == geometry.locate(100.0 + 3 * geometry.perimeter)


@pytest.mark.parametrize("s, expected", [
    (0.0, (7.5, 7.5, 0, True)),
    (100.0, (107.5, 7.5, 0, True)),
    (700.0, (642.5, 72.5, 90, False)),
    (1100.0, (562.5, 392.5, 180, True)),
    (1800.0, (7.5, 247.5, 270, False)),
])
def test_locate_segments(geometry, s, expected):
    point = geometry.locate(s)
    assert point.x == pytest.approx(expected[0])
    assert point.y == pytest.approx(expected[1])
    assert point.angle == expected[2]
    assert point.horizontal is expected[3]


def test_axis_names(geometry):
    assert geometry.locate(10.0).axis == "horizontal"
    assert geometry.locate(700.0).axis == "vertical"


@pytest.mark.parametrize("boundary", [635.0, 1020.0, 1655.0, 2040.0])
def test_locate_is_continuous_at_corners(geometry, boundary):
    before = geometry.locate(boundary - 1e-6)
    after = geometry.locate(boundary + 1e-6)
    assert before.x == pytest.approx(after.x, abs=1e-4)
    assert before.y == pytest.approx(after.y, abs=1e-4)


def test_wrap_negative_and_tiny_values(geometry):
    assert geometry.wrap(-10.0) == pytest.approx(2030.0)
    assert geometry.wrap(-1e-20) == 0.0
    assert geometry.wrap(4090.0) == pytest.approx(10.0)


def test_locate_many_matches_locate(geometry, rng):
    track = rng.uniform(-3000.0, 6000.0, size=300)
    xs, ys, horizontal = geometry.locate_many(track)
    for s, x, y, h in zip(track, xs, ys, horizontal):
        point = geometry.locate(float(s))
        assert x == pytest.approx(point.x)
        assert y == pytest.approx(point.y)
        assert bool(h) == point.horizontal


def test_carrier_points_apply_offset_perpendicular(geometry):
    track = np.array([100.0, 700.0])
    transverse = np.array([3.0, -2.0])
    points = geometry.carrier_points(track, transverse)
    # Top segment: offset moves y. Right segment: offset moves x.
    np.testing.assert_allclose(points[0], [107.5, 10.5])
    np.testing.assert_allclose(points[1], [640.5, 72.5])


def test_footprints():
    assert POWER_SOURCE_FOOTPRINT.contains(300.0, 7.5)
    assert not POWER_SOURCE_FOOTPRINT.contains(300.0, 392.5)
    assert SWITCH_GAP_FOOTPRINT.contains(460.0, 7.5)
    assert not SWITCH_GAP_FOOTPRINT.contains(440.0, 7.5)
    assert Footprint(0.0, 10.0, rail_y=0.0).contains(5.0, 0.9)
    assert not Footprint(0.0, 10.0, rail_y=0.0).contains(5.0, 1.0)


def test_field_markers_skip_the_battery(geometry):
    markers = geometry.field_markers(60.0)
    # 34 positions along the track, two of them under the battery.
    assert markers.shape == (32, 3)
    for x, y, _ in markers:
        assert not POWER_SOURCE_FOOTPRINT.contains(x, y)
    assert set(markers[:, 2]) == {0.0, 90.0, 180.0, 270.0}
