from __future__ import annotations

import pytest

from modules.geo.distance import distance, haversine_km, path_length, radius_meters
from schemas.tour import DistanceUnit


def test_haversine_one_degree_of_latitude():
    assert haversine_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(111.195, abs=0.01)


def test_same_point_is_zero():
    assert distance((43.5, 16.4), (43.5, 16.4)) == 0.0


def test_miles_conversion():
    a, b = (43.5081, 16.4402), (43.0, 16.0)
    assert distance(a, b, DistanceUnit.MILES) == pytest.approx(distance(a, b) / 1.609344)


@pytest.mark.parametrize("points", [[], [(43.5, 16.4)]])
def test_path_shorter_than_two_points(points):
    assert path_length(points) == 0.0


def test_path_keeps_given_order():
    a, b, c = (43.5, 16.4), (43.0, 16.4), (43.4, 16.4)
    # a → b → c doubles back; reordering would be shorter
    assert path_length([a, b, c]) == pytest.approx(distance(a, b) + distance(b, c))
    assert path_length([a, b, c]) > path_length([a, c, b])


def test_radius_meters():
    assert radius_meters(2, DistanceUnit.KM) == 2000
    assert radius_meters(2, DistanceUnit.MILES) == pytest.approx(3218.68)


@pytest.mark.parametrize("raw,unit", [
    ("km", DistanceUnit.KM),
    ("kilometers", DistanceUnit.KM),
    ("Miles", DistanceUnit.MILES),
    (DistanceUnit.MILES, DistanceUnit.MILES),
])
def test_unit_parsing(raw, unit):
    assert DistanceUnit.parse(raw) is unit


def test_unknown_unit():
    with pytest.raises(ValueError):
        DistanceUnit.parse("furlongs")
