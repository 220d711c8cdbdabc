# homecook/tests/test_geo.py
import math

import pytest

from homecook.models.common import Coordinates
from homecook.services import geo

LONDON = Coordinates(latitude=51.5074, longitude=-0.1278)
PARIS = Coordinates(latitude=48.8566, longitude=2.3522)


def test_distance_between_cities():
    assert geo.distance_km(LONDON, PARIS) == pytest.approx(343.5, abs=2.0)


def test_distance_is_symmetric_and_zero_on_same_point():
    assert geo.distance_km(LONDON, PARIS) == pytest.approx(geo.distance_km(PARIS, LONDON))
    assert geo.distance_km(LONDON, LONDON) == 0


def test_short_distance_formats_in_meters():
    # ~0.0027 degrees of latitude is about 300 m
    nearby = Coordinates(latitude=LONDON.latitude + 0.0027, longitude=LONDON.longitude)
    d = geo.distance_km(LONDON, nearby)
    assert d < 1
    assert geo.format_distance(d) == "300 m"
    assert geo.format_distance(12.345) == "12.3 km"
    assert geo.format_distance(None) is None


def test_zero_radius_never_excludes():
    for d in (0.0, 5.0, 5000.0, None):
        assert geo.within_radius(d, 0)
        assert geo.within_radius(d, None)


def test_radius_filter():
    assert geo.within_radius(4.9, 5)
    assert geo.within_radius(5.0, 5)
    assert not geo.within_radius(5.1, 5)
    # unknown distance is kept
    assert geo.within_radius(None, 5)


def test_sort_nearest_first_is_stable_with_unknowns_last():
    items = [("a", 3.0), ("b", None), ("c", 1.0), ("d", 3.0), ("e", None), ("f", 0.5)]
    ordered = geo.sort_nearest_first(items, lambda i: i[1])
    assert [name for name, _ in ordered] == ["f", "c", "a", "d", "b", "e"]


def test_distance_between_handles_missing_points():
    assert geo.distance_between(None, LONDON) is None
    assert geo.distance_between(LONDON, None) is None
    assert geo.distance_between(LONDON, PARIS) == pytest.approx(geo.distance_km(LONDON, PARIS))


def test_antipodal_points_are_half_the_circumference():
    half = math.pi * geo.EARTH_RADIUS_KM
    lat = -90.0
    while lat <= 90.0:
        a = Coordinates(latitude=lat, longitude=13.3)
        b = Coordinates(latitude=-lat, longitude=-166.7)
        assert geo.distance_km(a, b) == pytest.approx(half, abs=1.0)
        lat = round(lat + 0.7, 1)


def test_nearly_antipodal_candidate_is_kept_by_discovery_helpers():
    origin = Coordinates(latitude=-26.3, longitude=13.3)
    other_side = Coordinates(latitude=26.3, longitude=-166.7)
    d = geo.distance_between(origin, other_side)
    assert geo.within_radius(d, 0)
    assert geo.format_distance(d) == "20015.1 km"
