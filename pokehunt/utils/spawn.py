"""Location based spawn engine.

The engine is polled with location samples. Each sample may produce one
spawn, subject to a cooldown between successful spawns and a cap on how many
spawns are alive at once. Spawns expire after a fixed window; expired ones
are dropped lazily whenever the engine is asked for them.
"""
import logging
import random
import time
from enum import Enum
from typing import Callable, List, Optional, Tuple

from ..constants import MAX_SPAWNS, NEARBY_RADIUS_METERS, SPAWN_COOLDOWN, SPAWN_EXPIRY, SPAWN_RADIUS_METERS
from ..exceptions import CatalogFetchError, ConfigurationError
from ..models import CatalogEntry, Location, SpawnedEntity
from .biome import Biome, classify, types_for
from .geo import distance_meters, offset_location
from .observers import Observable

log = logging.getLogger("red.pokehunt.spawn")


class SpawnState(Enum):
    IDLE = "idle"
    COOLDOWN = "cooldown"
    ATTEMPTING = "attempting"


class SpawnEngine(Observable):
    """Own the live spawns of one hunting session.

    Args:
        client: Catalog client providing ``get_roster`` and ``get_entry``
        cooldown: Seconds required between successful spawns
        max_spawns: Live spawns allowed at once
        radius: Spawns are placed within this many meters of the hunter
        expiry: Seconds a spawn stays alive
        clock: Callable returning a monotonic time in seconds
        rng: Random source for type, roster member and placement
        classifier: Callable mapping a location to a biome
    """

    def __init__(
        self,
        client,
        cooldown: float = SPAWN_COOLDOWN,
        max_spawns: int = MAX_SPAWNS,
        radius: float = SPAWN_RADIUS_METERS,
        expiry: float = SPAWN_EXPIRY,
        clock: Callable[[], float] = time.monotonic,
        rng: Optional[random.Random] = None,
        classifier: Callable[[Location], Biome] = classify,
    ):
        super().__init__()
        if cooldown < 0:
            raise ConfigurationError("cooldown", cooldown, "cannot be negative")
        if max_spawns < 1:
            raise ConfigurationError("max_spawns", max_spawns, "must be at least 1")
        if radius < 0:
            raise ConfigurationError("radius", radius, "cannot be negative")
        if expiry <= 0:
            raise ConfigurationError("expiry", expiry, "must be positive")

        self.client = client
        self.cooldown = cooldown
        self.max_spawns = max_spawns
        self.radius = radius
        self.expiry = expiry
        self.clock = clock
        self.rng = rng or random.Random()
        self.classifier = classifier

        self._live: List[SpawnedEntity] = []
        self.last_spawn_at: Optional[float] = None
        self._attempting = False
        self._generation = 0
        self._last_stamp = -1

    @property
    def state(self) -> SpawnState:
        if self._attempting:
            return SpawnState.ATTEMPTING
        if self.cooldown_remaining() > 0:
            return SpawnState.COOLDOWN
        return SpawnState.IDLE

    @property
    def live_spawns(self) -> Tuple[SpawnedEntity, ...]:
        """Snapshot of spawns that have not expired."""
        now = self.clock()
        return tuple(spawn for spawn in self._live if not spawn.is_expired(now, self.expiry))

    def cooldown_remaining(self, now: Optional[float] = None) -> float:
        if self.last_spawn_at is None:
            return 0.0
        if now is None:
            now = self.clock()
        return max(0.0, self.cooldown - (now - self.last_spawn_at))

    async def try_spawn(self, location: Location) -> Optional[SpawnedEntity]:
        """Attempt to spawn one Pokémon near ``location``.

        Returns the new spawn, or None when the attempt was rejected or failed.
        Failures never raise and never start the cooldown.
        """
        if self._attempting:
            log.debug("Spawn attempt already in flight, ignoring location sample")
            return None

        now = self.clock()
        if self.cooldown_remaining(now) > 0:
            return None

        self.evict_expired(now)
        if len(self._live) >= self.max_spawns:
            log.debug(f"Spawn cap of {self.max_spawns} reached")
            return None

        self._attempting = True
        generation = self._generation
        try:
            entry = await self._pick_entry(location)
        except CatalogFetchError as e:
            log.info(f"Spawn attempt failed upstream: {e}")
            entry = None
        except Exception:
            log.exception("Unexpected error during spawn attempt")
            entry = None
        finally:
            self._attempting = False

        if entry is None:
            return None
        if generation != self._generation:
            log.debug(f"Discarding {entry.name}, spawns were cleared during the attempt")
            return None

        spawn = SpawnedEntity(
            id=self._make_id(entry.id, now),
            entry=entry,
            location=offset_location(location, self.radius, self.rng),
            spawned_at=now,
        )
        self._live.append(spawn)
        self.last_spawn_at = now
        log.debug(f"Spawned {entry.name} as {spawn.id}")
        self._emit(self.live_spawns)
        return spawn

    def remove_spawn(self, spawn_id: str) -> bool:
        """Remove a spawn after it was caught or dismissed. Unknown ids are ignored."""
        remaining = [spawn for spawn in self._live if spawn.id != spawn_id]
        if len(remaining) == len(self._live):
            return False
        self._live = remaining
        self._emit(self.live_spawns)
        return True

    def get_spawn(self, spawn_id: str) -> Optional[SpawnedEntity]:
        for spawn in self.live_spawns:
            if spawn.id == spawn_id:
                return spawn
        return None

    def nearby(self, location: Location, radius: float = NEARBY_RADIUS_METERS) -> List[SpawnedEntity]:
        return [spawn for spawn in self.live_spawns if distance_meters(location, spawn.location) <= radius]

    def evict_expired(self, now: Optional[float] = None) -> int:
        if now is None:
            now = self.clock()
        remaining = [spawn for spawn in self._live if not spawn.is_expired(now, self.expiry)]
        evicted = len(self._live) - len(remaining)
        if evicted:
            self._live = remaining
            log.debug(f"{evicted} spawns fled")
            self._emit(self.live_spawns)
        return evicted

    def clear(self) -> None:
        """Drop every spawn and reset the cooldown; in-flight attempts are discarded."""
        self._live = []
        self.last_spawn_at = None
        self._generation += 1
        self._emit(self.live_spawns)

    async def _pick_entry(self, location: Location) -> Optional[CatalogEntry]:
        biome = self.classifier(location)
        type_name = self.rng.choice(types_for(biome))

        roster = await self.client.get_roster(type_name)
        if not roster:
            log.debug(f"Empty roster for type {type_name}")
            return None

        member = self.rng.choice(roster)
        return await self.client.get_entry(member.url)

    def _make_id(self, species_id: int, now: float) -> str:
        # Millisecond stamps only move forward so ids never repeat within a run
        stamp = max(int(now * 1000), self._last_stamp + 1)
        self._last_stamp = stamp
        return f"{species_id}-{stamp}"
