"""Tests for the latitude based biome heuristic."""
import pytest

from pokehunt.constants import BIOME_TYPES, DEFAULT_SPAWN_TYPES
from pokehunt.models import Location
from pokehunt.utils.biome import Biome, classify, types_for


@pytest.mark.parametrize(
    "latitude, longitude, expected",
    [
        (0.05, 0.05, Biome.WATER),
        (-0.05, 0.09, Biome.WATER),
        (0.05, 12.0, Biome.RURAL),
        (10.0, 10.0, Biome.RURAL),
        (35.0, 139.0, Biome.URBAN),
        (45.0, 7.0, Biome.URBAN),
        (-45.0, 170.0, Biome.URBAN),
        (50.0, 0.0, Biome.FOREST),
        (55.0, 37.0, Biome.FOREST),
        (70.0, 25.0, Biome.MOUNTAIN),
        (-80.0, 0.0, Biome.MOUNTAIN),
    ],
)
def test_classify(latitude, longitude, expected):
    assert classify(Location(latitude, longitude)) == expected


@pytest.mark.parametrize("biome", list(Biome))
def test_every_biome_has_spawn_types(biome):
    assert len(types_for(biome)) > 0


def test_known_biomes_use_their_own_table():
    assert types_for(Biome.WATER) == BIOME_TYPES["water"]
    assert types_for("forest") == BIOME_TYPES["forest"]


def test_unknown_biome_falls_back():
    assert types_for(Biome.UNKNOWN) == DEFAULT_SPAWN_TYPES
    assert types_for("volcano") == DEFAULT_SPAWN_TYPES
