"""Pytest fixtures and fakes for PokeHunt tests."""
import asyncio
import random
from typing import Dict, List, Optional

import pytest

from pokehunt.exceptions import CatalogFetchError
from pokehunt.models import CatalogEntry, CatalogPage, DetailBundle, EvolutionLink, RosterRef
from pokehunt.utils.api import extract_id_from_url
from pokehunt.utils.cache import CacheStore
from pokehunt.utils.storage import MemoryStorage


class FakeClock:
    """Manually advanced clock in epoch seconds."""

    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_entry(pokemon_id: int, name: Optional[str] = None, types=("normal",), abilities=("run-away",)) -> CatalogEntry:
    return CatalogEntry(
        id=pokemon_id,
        name=name or f"pokemon-{pokemon_id}",
        types=tuple(types),
        abilities=tuple(abilities),
        base_stats={"hp": 40 + pokemon_id},
        height=7,
        weight=69,
        sprite=f"https://img.example/{pokemon_id}.png",
    )


def make_bundle(pokemon_id: int, flavor: str = "A fresh bundle.") -> DetailBundle:
    return DetailBundle(
        entry=make_entry(pokemon_id),
        flavor_text=flavor,
        genus="Seed Pokémon",
        evolution_chain=(EvolutionLink("pokemon-1", 1), EvolutionLink("pokemon-2", 2)),
    )


class FakeCatalogClient:
    """Scripted catalog client; set ``fail`` to make every call raise, ``gate`` to hold calls."""

    def __init__(self, entries: List[CatalogEntry] = (), rosters: Dict[str, List[int]] = None):
        self.entries = list(entries)
        self.by_id = {entry.id: entry for entry in self.entries}
        self.rosters = rosters or {}
        self.pages: Dict[int, CatalogPage] = {}
        self.details: Dict[int, DetailBundle] = {}
        self.fail = False
        self.gate: Optional[asyncio.Event] = None
        self.calls = []

    async def _enter(self, name: str, *args):
        self.calls.append((name,) + args)
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise CatalogFetchError(f"https://pokeapi.test/{name}", status=503)

    async def list_page(self, offset: int, limit: int) -> CatalogPage:
        await self._enter("list_page", offset, limit)
        if offset in self.pages:
            return self.pages[offset]
        chunk = self.entries[offset:offset + limit]
        return CatalogPage(entries=tuple(chunk), has_next=offset + limit < len(self.entries))

    async def get_detail(self, pokemon_id: int) -> DetailBundle:
        await self._enter("get_detail", pokemon_id)
        return self.details.get(pokemon_id) or make_bundle(pokemon_id)

    async def get_roster(self, type_name: str) -> List[RosterRef]:
        await self._enter("get_roster", type_name)
        return [
            RosterRef(id=pokemon_id, url=f"https://pokeapi.test/api/v2/pokemon/{pokemon_id}/")
            for pokemon_id in self.rosters.get(type_name, [])
        ]

    async def get_entry(self, pokemon) -> CatalogEntry:
        await self._enter("get_entry", pokemon)
        pokemon_id = extract_id_from_url(pokemon) if isinstance(pokemon, str) else pokemon
        return self.by_id.get(pokemon_id) or make_entry(pokemon_id)

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def cache(storage, clock):
    return CacheStore(storage, clock=clock)


@pytest.fixture
def catalog():
    entries = [make_entry(i) for i in range(1, 46)]
    types = ("normal", "electric", "poison", "psychic", "grass", "ground", "bug",
             "water", "ice", "flying", "rock", "steel")
    rosters = {type_name: [25, 26] for type_name in types}
    return FakeCatalogClient(entries, rosters)
