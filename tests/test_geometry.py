import math

import pytest

from shipdash.models.domain import Coordinates, Location
from shipdash.services.geometry import curve_points


def test_curve_keeps_endpoints_and_bows_midpoint():
    start = Coordinates(lat=0.0, lng=0.0)
    end = Coordinates(lat=10.0, lng=20.0)

    points = curve_points(start, end)

    assert len(points) == 3
    assert points[0] == start
    assert points[2] == end
    # midpoint (5, 10) shifted by swapped deltas (20, 10) * 0.2
    assert points[1].lat == pytest.approx(9.0)
    assert points[1].lng == pytest.approx(12.0)


def test_curve_of_coincident_points_is_degenerate():
    point = Coordinates(lat=48.8566, lng=2.3522)

    assert curve_points(point, point) == [point, point, point]


def test_curve_accepts_locations_and_custom_factor():
    start = Location(name="Paris", lat=48.8566, lng=2.3522)
    end = Location(name="Berlin", lat=52.52, lng=13.405)

    straight = curve_points(start, end, factor=0.0)

    assert straight[1].lat == pytest.approx((48.8566 + 52.52) / 2)
    assert straight[1].lng == pytest.approx((2.3522 + 13.405) / 2)
    assert straight[0] == Coordinates(48.8566, 2.3522)


def test_curve_propagates_nan():
    points = curve_points(Coordinates(float("nan"), 0.0), Coordinates(1.0, 1.0))

    assert math.isnan(points[0].lat)
    assert math.isnan(points[1].lat)
    assert math.isnan(points[1].lng)
