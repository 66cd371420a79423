"""Time-bounded cache store.

Records are wrapped with the time they were captured and written to a
key/value storage backend as JSON. Reads return records whether they are
fresh or stale; callers decide what staleness means for them.
"""
import json
import logging
import time
from typing import Any, Callable, List, Optional, Tuple

from ..constants import CACHE_RETENTION, CACHE_TTL
from ..exceptions import ConfigurationError, StorageFullError
from ..models import CacheRecord

log = logging.getLogger("red.pokehunt.cache")


class CacheStore:
    """Persist JSON-shaped values with a fixed time-to-live.

    Args:
        storage: Backend implementing get_string/set_string/list_keys/get_prefixed/remove_many
        ttl: Seconds a record stays fresh
        retention: Records kept per key family when the backend is full
        clock: Callable returning the current time in epoch seconds
    """

    def __init__(
        self,
        storage,
        ttl: float = CACHE_TTL,
        retention: int = CACHE_RETENTION,
        clock: Callable[[], float] = time.time,
    ):
        if ttl <= 0:
            raise ConfigurationError("ttl", ttl, "must be positive")
        if retention < 1:
            raise ConfigurationError("retention", retention, "must be at least 1")
        self.storage = storage
        self.ttl = ttl
        self.retention = retention
        self.clock = clock

    @staticmethod
    def build_key(namespace: str, user_id: Any, entity_id: Any) -> str:
        """Build a cache key scoped to one user, e.g. ``cache:pokemon:detail:42:25``."""
        return f"{namespace}:{user_id}:{entity_id}"

    @staticmethod
    def family_of(key: str) -> str:
        """Return the prefix shared by every key of the same namespace."""
        namespace = key.rsplit(":", 2)[0]
        return f"{namespace}:"

    def is_fresh(self, record: CacheRecord, now: Optional[float] = None) -> bool:
        if now is None:
            now = self.clock()
        return now - record.captured_at < self.ttl

    async def get(self, key: str) -> Optional[CacheRecord]:
        """Return the record stored under ``key`` or None.

        Missing keys, unreadable storage and malformed records all read as None.
        """
        try:
            raw = await self.storage.get_string(key)
        except Exception as e:
            log.warning(f"Cache read failed for {key}: {e}")
            return None
        if raw is None:
            return None
        return self._decode(key, raw)

    async def put(self, key: str, value: Any) -> bool:
        """Write ``value`` under ``key``, replacing any previous record.

        Returns False when the write had to be dropped. Never raises: a
        failed cache write leaves the caller working from memory.
        """
        record = CacheRecord(value=value, captured_at=self.clock())
        try:
            raw = json.dumps(record.to_dict())
        except (TypeError, ValueError) as e:
            log.error(f"Cannot serialize cache record for {key}: {e}")
            return False

        try:
            await self.storage.set_string(key, raw)
            return True
        except StorageFullError:
            log.info(f"Cache storage full while writing {key}, evicting old records")
        except Exception as e:
            log.warning(f"Cache write failed for {key}: {e}")
            return False

        await self.evict(self.family_of(key))
        try:
            await self.storage.set_string(key, raw)
            return True
        except Exception as e:
            log.warning(f"Dropping cache write for {key} after eviction: {e}")
            return False

    async def evict(self, prefix: str) -> int:
        """Remove all but the ``retention`` most recently captured records under ``prefix``."""
        try:
            family = await self.storage.get_prefixed(prefix)
        except Exception as e:
            log.warning(f"Could not read cache records for {prefix}: {e}")
            return 0
        if len(family) <= self.retention:
            return 0

        stamped: List[Tuple[float, str]] = []
        for key, raw in family.items():
            record = self._decode(key, raw)
            # Unreadable records sort as the oldest
            stamped.append((record.captured_at if record else float("-inf"), key))
        stamped.sort(reverse=True)
        doomed = [key for _, key in stamped[self.retention:]]

        try:
            await self.storage.remove_many(doomed)
        except Exception as e:
            log.warning(f"Cache eviction failed for {prefix}: {e}")
            return 0
        log.debug(f"Evicted {len(doomed)} records from {prefix}")
        return len(doomed)

    def _decode(self, key: str, raw: str) -> Optional[CacheRecord]:
        try:
            return CacheRecord.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            log.debug(f"Ignoring corrupt cache record {key}: {e}")
            return None
