"""Per-user hunting session: the catalog list, detail cache and spawn engine of one user."""
import logging
from typing import Dict, List, Optional, Set

import discord

from .constants import MAX_SESSIONS, MAX_SPAWNS, SPAWN_COOLDOWN, SPAWN_RADIUS_METERS
from .models import Location
from .utils.aggregator import ListAggregator
from .utils.cache import CacheStore
from .utils.details import DetailCache
from .utils.formatters import create_spawn_embed
from .utils.spawn import SpawnEngine

log = logging.getLogger("red.pokehunt")


class HuntSession:
    """Everything the cog keeps in memory for one user.

    Catalog browsing state is cached under the user's own scope; detail
    bundles are shared between users. Spawns announce themselves in the
    channel where the user started hunting.
    """

    def __init__(
        self,
        user_id: int,
        client,
        cache: CacheStore,
        guild_id: Optional[int] = None,
        cooldown: float = SPAWN_COOLDOWN,
        radius: float = SPAWN_RADIUS_METERS,
        max_spawns: int = MAX_SPAWNS,
        prefix: str = "[p]",
    ):
        self.user_id = user_id
        self.guild_id = guild_id
        self.prefix = prefix
        self.catalog = ListAggregator(client, cache, user_id=user_id)
        self.details = DetailCache(client, cache)
        self.engine = SpawnEngine(client, cooldown=cooldown, max_spawns=max_spawns, radius=radius)

        self.location: Optional[Location] = None
        self.hunting = False
        self.channel: Optional[discord.abc.Messageable] = None
        self._announced: Set[str] = set()
        self.engine.subscribe(self.on_spawns_changed)

    def start(self, channel: discord.abc.Messageable, location: Location, prefix: str) -> None:
        self.channel = channel
        self.location = location
        self.prefix = prefix
        self.hunting = True

    def stop(self) -> None:
        """Stop hunting; spawns still resolving upstream are thrown away."""
        self.hunting = False
        self.engine.clear()

    async def on_spawns_changed(self, spawns) -> None:
        current = {spawn.id for spawn in spawns}
        fresh = [spawn for spawn in spawns if spawn.id not in self._announced]
        self._announced = current

        if not self.hunting or self.channel is None:
            return
        for spawn in fresh:
            try:
                await self.channel.send(embed=create_spawn_embed(self.prefix, spawn, self.location))
            except discord.HTTPException as e:
                log.warning(f"Could not announce spawn {spawn.id} for user {self.user_id}: {e}")


class SessionRegistry:
    """Sessions by user id, bounded to ``max_sessions``.

    When the bound is exceeded the least recently used sessions that are not
    hunting are stopped and dropped. Hunting sessions are never evicted.
    """

    def __init__(self, max_sessions: int = MAX_SESSIONS):
        self.max_sessions = max_sessions
        self._sessions: Dict[int, HuntSession] = {}  # insertion order is recency order

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, user_id: int) -> bool:
        return user_id in self._sessions

    def get(self, user_id: int) -> Optional[HuntSession]:
        hunt = self._sessions.pop(user_id, None)
        if hunt is not None:
            self._sessions[user_id] = hunt
        return hunt

    def add(self, hunt: HuntSession) -> None:
        self._sessions.pop(hunt.user_id, None)
        self._sessions[hunt.user_id] = hunt
        self._trim(keep=hunt.user_id)

    def pop(self, user_id: int, default=None) -> Optional[HuntSession]:
        return self._sessions.pop(user_id, default)

    def values(self) -> List[HuntSession]:
        return list(self._sessions.values())

    def discard_if_idle(self, user_id: int) -> bool:
        """Drop a session that is neither hunting nor holding a loaded catalog."""
        hunt = self._sessions.get(user_id)
        if hunt is None or hunt.hunting or hunt.catalog.items:
            return False
        del self._sessions[user_id]
        return True

    def _trim(self, keep: int) -> None:
        excess = len(self._sessions) - self.max_sessions
        if excess <= 0:
            return
        idle = [user_id for user_id, hunt in self._sessions.items() if not hunt.hunting and user_id != keep]
        for user_id in idle[:excess]:
            hunt = self._sessions.pop(user_id)
            hunt.stop()
            log.debug(f"Evicted idle hunting session of user {user_id}")
