"""Coarse biome detection from coordinates.

This is a latitude heuristic, not a geographic classifier. The bands overlap
and are checked in order, so the earlier check wins: 45 degrees is urban,
not mountain, and the forest band only applies between 50 and 60 degrees.
"""
from enum import Enum
from typing import Tuple, Union

from ..constants import BIOME_TYPES, DEFAULT_SPAWN_TYPES
from ..models import Location


class Biome(str, Enum):
    URBAN = "urban"
    RURAL = "rural"
    WATER = "water"
    FOREST = "forest"
    MOUNTAIN = "mountain"
    UNKNOWN = "unknown"


def classify(location: Location) -> Biome:
    latitude = abs(location.latitude)
    longitude = abs(location.longitude)

    # Small box around null island
    if latitude < 0.1 and longitude < 0.1:
        return Biome.WATER

    if 30 < latitude < 50:
        return Biome.URBAN

    if 40 < latitude < 60:
        return Biome.FOREST

    if latitude > 45:
        return Biome.MOUNTAIN

    return Biome.RURAL


def types_for(biome: Union[Biome, str]) -> Tuple[str, ...]:
    """Pokémon types that spawn in ``biome``; never empty."""
    key = biome.value if isinstance(biome, Biome) else str(biome)
    return BIOME_TYPES.get(key) or DEFAULT_SPAWN_TYPES
