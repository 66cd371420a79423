"""Tests for distance and spawn placement helpers."""
import math
import random

import pytest

from pokehunt.constants import METERS_PER_DEGREE
from pokehunt.models import Location
from pokehunt.utils.geo import distance_meters, offset_location, random_offset


def test_distance_is_zero_for_the_same_point():
    here = Location(51.5, -0.12)

    assert distance_meters(here, here) == 0


def test_distance_is_symmetric():
    a = Location(40.7128, -74.0060)
    b = Location(34.0522, -118.2437)

    assert distance_meters(a, b) == pytest.approx(distance_meters(b, a))


def test_one_degree_of_latitude():
    assert distance_meters(Location(0, 0), Location(1, 0)) == pytest.approx(111194.9, abs=0.1)


def test_random_offset_stays_within_radius():
    rng = random.Random(7)
    limit = 100 / METERS_PER_DEGREE

    for _ in range(500):
        d_lat, d_lng = random_offset(100, rng)
        assert math.hypot(d_lat, d_lng) <= limit + 1e-12


def test_zero_radius_places_on_the_hunter():
    origin = Location(10.0, 20.0)

    assert offset_location(origin, 0, random.Random(1)) == origin


def test_offset_location_is_reproducible_with_a_seed():
    origin = Location(10.0, 20.0)

    assert offset_location(origin, 100, random.Random(3)) == offset_location(origin, 100, random.Random(3))
