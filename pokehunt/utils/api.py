"""Remote catalog client for PokeAPI.

The client is plain request/response: any non-200 answer or network failure
surfaces as :class:`CatalogFetchError` and nothing is retried or cached here.
"""
import asyncio
import logging
import re
from typing import Any, Dict, List, Optional, Union

import aiohttp

from ..constants import DEFAULT_GENUS, NO_FLAVOR_TEXT, PAGE_SIZE, POKE_API_URL, REQUEST_TIMEOUT
from ..exceptions import CatalogFetchError
from ..models import CatalogEntry, CatalogPage, DetailBundle, EvolutionLink, RosterRef

log = logging.getLogger("red.pokehunt")

_WHITESPACE = re.compile(r"\s+")
_CONTROL_BREAKS = re.compile(r"[\f\n\r]")


def sanitize_flavor_text(text: str) -> str:
    """Collapse PokeAPI flavor text (form feeds, hard line breaks) onto a single line."""
    return _WHITESPACE.sub(" ", _CONTROL_BREAKS.sub(" ", text)).strip()


def extract_id_from_url(url: str) -> int:
    """Return the trailing numeric id of a resource URL, or -1 if there is none."""
    parts = [part for part in url.split("/") if part]
    if not parts:
        return -1
    try:
        return int(parts[-1])
    except ValueError:
        return -1


def pick_english_flavor_text(species: Dict[str, Any]) -> str:
    for entry in species.get("flavor_text_entries", []):
        if entry["language"]["name"] == "en":
            return sanitize_flavor_text(entry["flavor_text"])
    return NO_FLAVOR_TEXT


def pick_english_genus(species: Dict[str, Any]) -> str:
    for entry in species.get("genera", []):
        if entry["language"]["name"] == "en":
            return entry["genus"]
    return DEFAULT_GENUS


def flatten_evolution_chain(link: Dict[str, Any], bucket: Optional[List[EvolutionLink]] = None) -> List[EvolutionLink]:
    """Flatten an evolution tree depth first.

    Parents come before their children and siblings keep the order the API
    returned them in, so ``A -> [B, C], B -> [D]`` becomes ``[A, B, D, C]``.
    Species without a numeric id in their URL are skipped.
    """
    if bucket is None:
        bucket = []

    species_id = extract_id_from_url(link["species"]["url"])
    if species_id != -1:
        bucket.append(EvolutionLink(name=link["species"]["name"], id=species_id))

    for child in link.get("evolves_to", []):
        flatten_evolution_chain(child, bucket)

    return bucket


class CatalogClient:
    """Read-only access to the PokeAPI catalog.

    Args:
        session: The aiohttp ClientSession to use for requests
        base_url: Root of the API
        timeout: Seconds before a request is abandoned
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        base_url: str = POKE_API_URL,
        timeout: float = REQUEST_TIMEOUT,
    ):
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout)

    async def fetch_json(self, url: str) -> Dict[str, Any]:
        try:
            async with self.session.get(url, timeout=self.timeout) as response:
                if response.status != 200:
                    log.debug(f"Catalog request {url} answered HTTP {response.status}")
                    raise CatalogFetchError(url, status=response.status)
                return await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise CatalogFetchError(url, details=str(e) or type(e).__name__) from e

    async def list_page(self, offset: int, limit: int = PAGE_SIZE) -> CatalogPage:
        """Fetch one page of summaries and resolve every summary to a full entry."""
        url = f"{self.base_url}/pokemon?offset={offset}&limit={limit}"
        list_data = await self.fetch_json(url)
        try:
            summaries = [summary["url"] for summary in list_data.get("results", [])]
            details = await asyncio.gather(*(self.fetch_json(summary) for summary in summaries))
            return CatalogPage(
                entries=tuple(CatalogEntry.from_api(detail) for detail in details),
                has_next=bool(list_data.get("next")),
            )
        except (KeyError, TypeError) as e:
            raise CatalogFetchError(url, details=f"malformed payload: {e}") from e

    async def get_entry(self, pokemon: Union[int, str]) -> CatalogEntry:
        """Fetch a single entry by id, slug or full resource URL."""
        if isinstance(pokemon, str) and pokemon.startswith(("http://", "https://")):
            url = pokemon
        else:
            url = f"{self.base_url}/pokemon/{pokemon}"
        data = await self.fetch_json(url)
        try:
            return CatalogEntry.from_api(data)
        except (KeyError, TypeError) as e:
            raise CatalogFetchError(url, details=f"malformed payload: {e}") from e

    async def get_detail(self, pokemon_id: int) -> DetailBundle:
        """Join the entry, its species text and its evolution chain into one bundle."""
        entry = await self.get_entry(pokemon_id)
        species_url = f"{self.base_url}/pokemon-species/{pokemon_id}"
        species = await self.fetch_json(species_url)
        try:
            evolution_url = species["evolution_chain"]["url"]
        except (KeyError, TypeError) as e:
            raise CatalogFetchError(species_url, details="species has no evolution chain") from e
        evolution = await self.fetch_json(evolution_url)

        try:
            return DetailBundle(
                entry=entry,
                flavor_text=pick_english_flavor_text(species),
                genus=pick_english_genus(species),
                evolution_chain=tuple(flatten_evolution_chain(evolution["chain"])),
            )
        except (KeyError, TypeError) as e:
            raise CatalogFetchError(evolution_url, details=f"malformed payload: {e}") from e

    async def get_roster(self, type_name: str) -> List[RosterRef]:
        """List every Pokémon of one type."""
        type_url = f"{self.base_url}/type/{type_name}"
        data = await self.fetch_json(type_url)
        roster = []
        try:
            for member in data.get("pokemon", []):
                url = member["pokemon"]["url"]
                pokemon_id = extract_id_from_url(url)
                if pokemon_id != -1:
                    roster.append(RosterRef(id=pokemon_id, url=url))
        except (KeyError, TypeError) as e:
            raise CatalogFetchError(type_url, details=f"malformed payload: {e}") from e
        return roster
