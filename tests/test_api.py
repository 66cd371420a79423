"""Tests for the PokeAPI client and its payload helpers."""
import aiohttp
import pytest

from pokehunt.constants import DEFAULT_GENUS, NO_FLAVOR_TEXT
from pokehunt.exceptions import CatalogFetchError
from pokehunt.models import CatalogEntry, EvolutionLink
from pokehunt.utils.api import (
    CatalogClient,
    extract_id_from_url,
    flatten_evolution_chain,
    pick_english_flavor_text,
    pick_english_genus,
    sanitize_flavor_text,
)

BASE = "https://pokeapi.test/api/v2"


def pokemon_payload(pokemon_id, name, types=("grass", "poison")):
    return {
        "id": pokemon_id,
        "name": name,
        "height": 7,
        "weight": 69,
        # Slots arrive out of order on purpose
        "types": [
            {"slot": index + 1, "type": {"name": type_name}}
            for index, type_name in reversed(list(enumerate(types)))
        ],
        "abilities": [{"ability": {"name": "overgrow"}}, {"ability": {"name": "chlorophyll"}}],
        "stats": [{"base_stat": 45, "stat": {"name": "hp"}}, {"base_stat": 49, "stat": {"name": "attack"}}],
        "sprites": {
            "front_default": f"https://img.test/{pokemon_id}.png",
            "other": {"official-artwork": {"front_default": f"https://img.test/art/{pokemon_id}.png"}},
        },
    }


def chain_link(name, pokemon_id, children=()):
    return {
        "species": {"name": name, "url": f"{BASE}/pokemon-species/{pokemon_id}/"},
        "evolves_to": list(children),
    }


class FakeResponse:
    def __init__(self, status, payload):
        self.status = status
        self._payload = payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Answers GETs from a url -> (status, payload) table."""

    def __init__(self, routes):
        self.routes = routes
        self.requested = []

    def get(self, url, timeout=None):
        self.requested.append(url)
        if url not in self.routes:
            raise aiohttp.ClientConnectionError(f"no route to {url}")
        status, payload = self.routes[url]
        return FakeResponse(status, payload)


def test_sanitize_flavor_text_collapses_breaks():
    raw = "When several of\fthese POKéMON\ngather, their\n\nelectricity could\r build."
    assert sanitize_flavor_text(raw) == (
        "When several of these POKéMON gather, their electricity could build."
    )


@pytest.mark.parametrize(
    "url, expected",
    [
        (f"{BASE}/pokemon/25/", 25),
        (f"{BASE}/pokemon-species/133", 133),
        (f"{BASE}/pokemon/pikachu/", -1),
        ("", -1),
    ],
)
def test_extract_id_from_url(url, expected):
    assert extract_id_from_url(url) == expected


def test_flatten_evolution_chain_is_depth_first():
    chain = chain_link("a", 1, [chain_link("b", 2, [chain_link("d", 4)]), chain_link("c", 3)])

    assert flatten_evolution_chain(chain) == [
        EvolutionLink("a", 1),
        EvolutionLink("b", 2),
        EvolutionLink("d", 4),
        EvolutionLink("c", 3),
    ]


def test_flatten_evolution_chain_skips_links_without_id():
    chain = chain_link("a", 1, [{"species": {"name": "mystery", "url": f"{BASE}/pokemon-species/x/"}, "evolves_to": []}])

    assert flatten_evolution_chain(chain) == [EvolutionLink("a", 1)]


def test_english_pickers_and_defaults():
    species = {
        "flavor_text_entries": [
            {"flavor_text": "Texte", "language": {"name": "fr"}},
            {"flavor_text": "A strange\fseed.", "language": {"name": "en"}},
        ],
        "genera": [{"genus": "Pokémon Graine", "language": {"name": "fr"}}, {"genus": "Seed Pokémon", "language": {"name": "en"}}],
    }

    assert pick_english_flavor_text(species) == "A strange seed."
    assert pick_english_genus(species) == "Seed Pokémon"
    assert pick_english_flavor_text({}) == NO_FLAVOR_TEXT
    assert pick_english_genus({"genera": []}) == DEFAULT_GENUS


def test_entry_from_api_orders_types_by_slot():
    entry = CatalogEntry.from_api(pokemon_payload(1, "bulbasaur"))

    assert entry.types == ("grass", "poison")
    assert entry.abilities == ("overgrow", "chlorophyll")
    assert entry.base_stats == {"hp": 45, "attack": 49}
    assert entry.sprite == "https://img.test/art/1.png"


def test_entry_from_api_falls_back_to_front_sprite():
    payload = pokemon_payload(1, "bulbasaur")
    payload["sprites"]["other"] = {}

    assert CatalogEntry.from_api(payload).sprite == "https://img.test/1.png"


@pytest.mark.asyncio
async def test_list_page_resolves_every_summary():
    session = FakeSession({
        f"{BASE}/pokemon?offset=0&limit=2": (200, {
            "next": f"{BASE}/pokemon?offset=2&limit=2",
            "results": [{"name": "bulbasaur", "url": f"{BASE}/pokemon/1/"}, {"name": "ivysaur", "url": f"{BASE}/pokemon/2/"}],
        }),
        f"{BASE}/pokemon/1/": (200, pokemon_payload(1, "bulbasaur")),
        f"{BASE}/pokemon/2/": (200, pokemon_payload(2, "ivysaur")),
    })
    client = CatalogClient(session, base_url=BASE)

    page = await client.list_page(0, 2)

    assert [entry.name for entry in page.entries] == ["bulbasaur", "ivysaur"]
    assert page.has_next is True


@pytest.mark.asyncio
async def test_last_page_has_no_next():
    session = FakeSession({f"{BASE}/pokemon?offset=40&limit=20": (200, {"next": None, "results": []})})

    page = await CatalogClient(session, base_url=BASE).list_page(40, 20)

    assert page.entries == ()
    assert page.has_next is False


@pytest.mark.asyncio
async def test_get_detail_joins_three_resources():
    session = FakeSession({
        f"{BASE}/pokemon/1": (200, pokemon_payload(1, "bulbasaur")),
        f"{BASE}/pokemon-species/1": (200, {
            "flavor_text_entries": [{"flavor_text": "A seed\non its back.", "language": {"name": "en"}}],
            "genera": [{"genus": "Seed Pokémon", "language": {"name": "en"}}],
            "evolution_chain": {"url": f"{BASE}/evolution-chain/1/"},
        }),
        f"{BASE}/evolution-chain/1/": (200, {
            "chain": chain_link("bulbasaur", 1, [chain_link("ivysaur", 2, [chain_link("venusaur", 3)])]),
        }),
    })

    bundle = await CatalogClient(session, base_url=BASE).get_detail(1)

    assert bundle.entry.name == "bulbasaur"
    assert bundle.flavor_text == "A seed on its back."
    assert bundle.genus == "Seed Pokémon"
    assert [link.id for link in bundle.evolution_chain] == [1, 2, 3]


@pytest.mark.asyncio
async def test_non_200_answer_raises_fetch_error():
    session = FakeSession({f"{BASE}/pokemon/9999": (404, {"detail": "Not found."})})

    with pytest.raises(CatalogFetchError) as excinfo:
        await CatalogClient(session, base_url=BASE).get_entry(9999)

    assert excinfo.value.status == 404
    assert "HTTP 404" in str(excinfo.value)


@pytest.mark.asyncio
async def test_network_error_raises_fetch_error():
    client = CatalogClient(FakeSession({}), base_url=BASE)

    with pytest.raises(CatalogFetchError) as excinfo:
        await client.get_roster("fire")

    assert excinfo.value.status is None


@pytest.mark.asyncio
async def test_undecodable_body_raises_fetch_error():
    session = FakeSession({f"{BASE}/pokemon/1": (200, ValueError("Expecting value"))})

    with pytest.raises(CatalogFetchError):
        await CatalogClient(session, base_url=BASE).get_entry(1)


@pytest.mark.asyncio
async def test_get_roster_and_entry_by_url():
    session = FakeSession({
        f"{BASE}/type/electric": (200, {"pokemon": [
            {"pokemon": {"name": "pikachu", "url": f"{BASE}/pokemon/25/"}},
            {"pokemon": {"name": "raichu", "url": f"{BASE}/pokemon/26/"}},
        ]}),
        f"{BASE}/pokemon/25/": (200, pokemon_payload(25, "pikachu", types=("electric",))),
    })
    client = CatalogClient(session, base_url=BASE)

    roster = await client.get_roster("electric")
    entry = await client.get_entry(roster[0].url)

    assert [member.id for member in roster] == [25, 26]
    assert entry.name == "pikachu"
    assert entry.types == ("electric",)
