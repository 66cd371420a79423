"""Key/value storage backends used by the cache store.

Every backend stores opaque strings and exposes the same coroutines:
``get_string``, ``set_string``, ``list_keys``, ``get_prefixed`` and ``remove_many``.
``set_string`` raises :class:`StorageFullError` when the backend is out of room.
"""
import logging
from typing import Dict, Iterable, List, Optional

from ..exceptions import ConfigurationError, StorageFullError

log = logging.getLogger("red.pokehunt.storage")


class MemoryStorage:
    """Process local storage, optionally bounded to ``capacity`` records."""

    def __init__(self, capacity: Optional[int] = None):
        if capacity is not None and capacity < 1:
            raise ConfigurationError("capacity", capacity, "must be at least 1")
        self.capacity = capacity
        self.data: Dict[str, str] = {}

    async def get_string(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set_string(self, key: str, value: str) -> None:
        if self.capacity is not None and key not in self.data and len(self.data) >= self.capacity:
            raise StorageFullError(key, self.capacity)
        self.data[key] = value

    async def list_keys(self, prefix: str) -> List[str]:
        return [key for key in self.data if key.startswith(prefix)]

    async def get_prefixed(self, prefix: str) -> Dict[str, str]:
        return {key: value for key, value in self.data.items() if key.startswith(prefix)}

    async def remove_many(self, keys: Iterable[str]) -> None:
        for key in keys:
            self.data.pop(key, None)


class ConfigStorage:
    """Storage kept in a global ``cache`` dict of a Red ``Config``.

    Red persists the whole dict through its own driver, so the backend caps
    the number of records at ``max_entries`` to keep the driver's document small.
    """

    def __init__(self, config, max_entries: int):
        if max_entries < 1:
            raise ConfigurationError("max_entries", max_entries, "must be at least 1")
        self.config = config
        self.max_entries = max_entries

    async def get_string(self, key: str) -> Optional[str]:
        cache = await self.config.cache()
        return cache.get(key)

    async def set_string(self, key: str, value: str) -> None:
        async with self.config.cache() as cache:
            if key not in cache and len(cache) >= self.max_entries:
                raise StorageFullError(key, self.max_entries)
            cache[key] = value

    async def list_keys(self, prefix: str) -> List[str]:
        cache = await self.config.cache()
        return [key for key in cache if key.startswith(prefix)]

    async def get_prefixed(self, prefix: str) -> Dict[str, str]:
        """Read every record under ``prefix`` from a single copy of the cache dict."""
        cache = await self.config.cache()
        return {key: value for key, value in cache.items() if key.startswith(prefix)}

    async def remove_many(self, keys: Iterable[str]) -> None:
        keys = list(keys)
        if not keys:
            return
        async with self.config.cache() as cache:
            for key in keys:
                cache.pop(key, None)
        log.debug(f"Removed {len(keys)} cached records")
