import logging

from gmaps_finder.geo import (
    distance_between,
    haversine_miles,
    km_to_miles,
    miles_to_km,
    miles_to_meters,
    radius_to_meters,
)
from gmaps_finder.models import Coordinates


def test_miles_to_meters_max_radius():
    assert miles_to_meters(31) == 49889


def test_radius_to_meters_clamps_to_provider_max(caplog):
    with caplog.at_level(logging.WARNING, logger="gmaps_finder.geo.distance"):
        assert radius_to_meters(40) == 50000
    assert "exceeds" in caplog.text


def test_radius_to_meters_under_cap_is_unchanged():
    assert radius_to_meters(10) == miles_to_meters(10)
    assert radius_to_meters(31) == 49889


def test_haversine_same_point_is_zero():
    assert haversine_miles(33.0, -96.7, 33.0, -96.7) == 0.0


def test_haversine_one_degree_latitude():
    # one degree of latitude is ~69.1 miles with R=3959
    assert haversine_miles(0.0, 0.0, 1.0, 0.0) == 69.1


def test_haversine_known_cities():
    # Dallas to Austin, roughly 182 miles
    d = haversine_miles(32.7767, -96.7970, 30.2672, -97.7431)
    assert 175 < d < 190


def test_haversine_unrounded():
    d = haversine_miles(0.0, 0.0, 1.0, 0.0, precision=None)
    assert 69.0 < d < 69.2
    assert d != round(d, 1)


def test_distance_between_is_symmetric():
    a = Coordinates(33.0198, -96.6989)
    b = Coordinates(33.1507, -96.8236)
    assert distance_between(a, b) == distance_between(b, a)


def test_unit_conversions():
    assert round(miles_to_km(10), 4) == 16.0934
    assert round(km_to_miles(10), 5) == 6.21371
