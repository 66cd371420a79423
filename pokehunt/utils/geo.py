"""Geospatial helpers for placing and finding spawns."""
import math
import random
from typing import Tuple

from ..constants import EARTH_RADIUS_METERS, METERS_PER_DEGREE
from ..models import Location


def distance_meters(a: Location, b: Location) -> float:
    """Great-circle distance between two locations using the haversine formula."""
    d_lat = math.radians(b.latitude - a.latitude)
    d_lng = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.latitude)) * math.cos(math.radians(b.latitude)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_METERS * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def random_offset(radius_meters: float, rng: random.Random = random) -> Tuple[float, float]:
    """Return a ``(lat, lng)`` delta in degrees at most ``radius_meters`` away.

    The distance is drawn uniformly along the radius rather than over the
    disk's area, so samples cluster slightly towards the centre. Gameplay
    relies on that distribution.
    """
    radius_degrees = radius_meters / METERS_PER_DEGREE
    angle = rng.random() * 2 * math.pi
    distance = rng.random() * radius_degrees
    return math.cos(angle) * distance, math.sin(angle) * distance


def offset_location(origin: Location, radius_meters: float, rng: random.Random = random) -> Location:
    d_lat, d_lng = random_offset(radius_meters, rng)
    return origin.offset(d_lat, d_lng)
