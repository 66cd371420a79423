"""Incremental catalog list with an offline fallback."""
import logging
from typing import Iterable, List, Optional, Sequence

from ..constants import DEGRADED_LIST_MESSAGE, LIST_CACHE_NAMESPACE, PAGE_SIZE, SHARED_SCOPE
from ..exceptions import CatalogFetchError, ConfigurationError
from ..models import CatalogEntry, CatalogView, ListPayload
from .cache import CacheStore
from .observers import Observable

log = logging.getLogger("red.pokehunt")


def merge_by_id(current: Sequence[CatalogEntry], incoming: Iterable[CatalogEntry]) -> List[CatalogEntry]:
    """Append ``incoming`` to ``current`` treating ``id`` as a set key.

    New ids are appended in arrival order; an id that is already present is
    replaced in place by the later occurrence.
    """
    merged = list(current)
    positions = {entry.id: index for index, entry in enumerate(merged)}
    for entry in incoming:
        if entry.id in positions:
            merged[positions[entry.id]] = entry
        else:
            positions[entry.id] = len(merged)
            merged.append(entry)
    return merged


class ListAggregator(Observable):
    """Grow a deduplicated list of catalog entries one page at a time.

    The merged list is persisted through the cache store after every
    successful page so the next session can render it before the network
    answers. A snapshot is emitted to listeners after every change.
    """

    def __init__(self, client, cache: CacheStore, user_id=SHARED_SCOPE, page_size: int = PAGE_SIZE):
        super().__init__()
        if page_size < 1:
            raise ConfigurationError("page_size", page_size, "must be at least 1")
        self.client = client
        self.cache = cache
        self.page_size = page_size
        self.cache_key = cache.build_key(LIST_CACHE_NAMESPACE, user_id, "all")

        self._items: List[CatalogEntry] = []
        self.has_more = True
        self.next_offset = 0
        self.degraded = False
        self.provisional = False
        self.message: Optional[str] = None
        self.loading_more = False
        self._generation = 0

    @property
    def items(self):
        return tuple(self._items)

    def snapshot(self) -> CatalogView:
        return CatalogView(
            items=tuple(self._items),
            has_more=self.has_more,
            next_offset=self.next_offset,
            degraded=self.degraded,
            provisional=self.provisional,
            message=self.message,
            loading_more=self.loading_more,
        )

    async def load_cached(self) -> Optional[ListPayload]:
        record = await self.cache.get(self.cache_key)
        if record is None:
            return None
        try:
            return ListPayload.from_dict(record.value)
        except (KeyError, TypeError, ValueError) as e:
            log.debug(f"Ignoring unreadable list cache {self.cache_key}: {e}")
            return None

    async def load_initial(self) -> CatalogView:
        """Show the cached list straight away, then replace it with page 0.

        Raises:
            CatalogFetchError: the first page could not be fetched and nothing was cached
        """
        self._generation += 1
        generation = self._generation

        cached = await self.load_cached()
        if cached is not None and generation == self._generation:
            self._items = list(cached.items)
            self.has_more = cached.has_more
            self.next_offset = cached.next_offset
            self.provisional = True
            self.degraded = False
            self.message = None
            self._emit(self.snapshot())

        try:
            page = await self.client.list_page(0, self.page_size)
        except CatalogFetchError as e:
            if generation != self._generation:
                return self.snapshot()
            if cached is None:
                log.warning(f"Initial catalog page failed with no cache to fall back on: {e}")
                raise
            log.warning(f"Initial catalog page failed, showing cached list: {e}")
            self.provisional = False
            self.degraded = True
            self.message = DEGRADED_LIST_MESSAGE
            self._emit(self.snapshot())
            return self.snapshot()

        if generation != self._generation:
            return self.snapshot()

        # Offset 0 is authoritative, so the page replaces whatever was shown
        self._items = merge_by_id([], page.entries)
        self.has_more = page.has_next
        self.next_offset = len(page.entries)
        self.provisional = False
        self.degraded = False
        self.message = None
        await self._persist()
        self._emit(self.snapshot())
        return self.snapshot()

    async def refresh(self) -> CatalogView:
        return await self.load_initial()

    async def load_more(self) -> CatalogView:
        """Fetch the page at ``next_offset`` and merge it into the list.

        Overlapping calls and calls once the catalog is exhausted return the
        current snapshot without fetching anything.

        Raises:
            CatalogFetchError: the page could not be fetched; loaded entries are kept
        """
        if self.loading_more or not self.has_more:
            return self.snapshot()

        self.loading_more = True
        generation = self._generation
        offset = self.next_offset
        try:
            page = await self.client.list_page(offset, self.page_size)
        except CatalogFetchError as e:
            log.warning(f"Could not load catalog page at offset {offset}: {e}")
            raise
        finally:
            self.loading_more = False

        if generation != self._generation:
            log.debug(f"Discarding catalog page at offset {offset}, list was reloaded")
            return self.snapshot()

        self._items = merge_by_id(self._items, page.entries)
        self.has_more = page.has_next
        self.next_offset = offset + len(page.entries)
        await self._persist()
        self._emit(self.snapshot())
        return self.snapshot()

    async def _persist(self) -> None:
        payload = ListPayload(items=list(self._items), has_more=self.has_more, next_offset=self.next_offset)
        await self.cache.put(self.cache_key, payload.to_dict())
