"""Per-species detail bundles with a stale-but-shown fallback."""
import asyncio
import logging
from typing import Optional, Set

from ..constants import DEGRADED_DETAIL_MESSAGE, DETAIL_CACHE_NAMESPACE, SHARED_SCOPE
from ..exceptions import CatalogFetchError
from ..models import DetailBundle, DetailResult
from .cache import CacheStore
from .observers import Observable

log = logging.getLogger("red.pokehunt")


class DetailCache(Observable):
    """Load detail bundles, serving the cached copy while the fresh one is fetched.

    Fresh bundles are written back in the background; the caller never
    waits on, or hears about, that write.
    """

    def __init__(self, client, cache: CacheStore, user_id=SHARED_SCOPE):
        super().__init__()
        self.client = client
        self.cache = cache
        self.user_id = user_id
        self._pending: Set[asyncio.Task] = set()

    def key_for(self, pokemon_id: int) -> str:
        return self.cache.build_key(DETAIL_CACHE_NAMESPACE, self.user_id, pokemon_id)

    async def load_cached(self, pokemon_id: int) -> Optional[DetailBundle]:
        record = await self.cache.get(self.key_for(pokemon_id))
        if record is None:
            return None
        try:
            return DetailBundle.from_dict(record.value)
        except (KeyError, TypeError, ValueError) as e:
            log.debug(f"Ignoring unreadable detail cache for {pokemon_id}: {e}")
            return None

    async def load(self, pokemon_id: int, skip_cache: bool = False) -> DetailResult:
        """Load the bundle for ``pokemon_id``.

        Raises:
            CatalogFetchError: the fetch failed and no cached bundle was available
        """
        cached = None
        if not skip_cache:
            cached = await self.load_cached(pokemon_id)
            if cached is not None:
                self._emit(DetailResult(pokemon_id, cached, provisional=True))

        try:
            fresh = await self.client.get_detail(pokemon_id)
        except CatalogFetchError as e:
            if cached is None:
                raise
            log.warning(f"Detail fetch for {pokemon_id} failed, showing cached bundle: {e}")
            result = DetailResult(pokemon_id, cached, degraded=True, message=DEGRADED_DETAIL_MESSAGE)
            self._emit(result)
            return result

        self._save_in_background(pokemon_id, fresh)
        result = DetailResult(pokemon_id, fresh)
        self._emit(result)
        return result

    async def drain(self) -> None:
        """Wait for background cache writes still in flight."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    def _save_in_background(self, pokemon_id: int, bundle: DetailBundle) -> None:
        task = asyncio.ensure_future(self.cache.put(self.key_for(pokemon_id), bundle.to_dict()))
        self._pending.add(task)
        task.add_done_callback(self._save_done)

    def _save_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        if task.exception() is not None:
            log.warning("Background detail cache save failed", exc_info=task.exception())
