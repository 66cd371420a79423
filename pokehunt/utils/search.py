"""Search and type filtering over the loaded catalog list."""
from typing import Iterable, List, Optional

from ..constants import POKEMON_TYPES
from ..models import CatalogEntry


def matches(entry: CatalogEntry, text: str) -> bool:
    """Whether ``text`` (already trimmed and lowercased) appears in the name, id, a type or an ability."""
    if not text:
        return True
    if text in entry.name.lower():
        return True
    if text in str(entry.id):
        return True
    if any(text in type_name.lower() for type_name in entry.types):
        return True
    return any(text in ability.lower() for ability in entry.abilities)


def filter_entries(
    entries: Iterable[CatalogEntry],
    text: str = "",
    type_name: Optional[str] = None,
) -> List[CatalogEntry]:
    needle = (text or "").strip().lower()
    results = []
    for entry in entries:
        if type_name and type_name not in entry.types:
            continue
        if matches(entry, needle):
            results.append(entry)
    return results


def available_types(entries: Iterable[CatalogEntry]) -> List[str]:
    """Every known type plus any new ones seen in ``entries``, sorted."""
    discovered = set(POKEMON_TYPES)
    for entry in entries:
        discovered.update(entry.types)
    return sorted(discovered)


def find_pokemon_id(entries: Iterable[CatalogEntry], query: str) -> Optional[int]:
    """Resolve a Pokédex number (``25``, ``#025``) or a loaded name to an id.

    Names are matched exactly against ``entries``; unknown names give None.
    """
    needle = (query or "").strip().lower().lstrip("#")
    if needle.isdigit():
        return int(needle)
    for entry in entries:
        if entry.name == needle:
            return entry.id
    return None
