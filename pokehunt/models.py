"""
pokehunt/models.py
Data models for catalog entries, cache records and spawns
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class CatalogEntry:
    """One species' browsable summary, immutable once fetched"""
    id: int
    name: str
    types: Tuple[str, ...] = ()
    abilities: Tuple[str, ...] = ()
    base_stats: Dict[str, int] = field(default_factory=dict, hash=False)
    height: int = 0
    weight: int = 0
    sprite: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "CatalogEntry":
        """Build an entry from a PokeAPI ``/pokemon`` payload"""
        sprites = data.get("sprites") or {}
        artwork = (sprites.get("other") or {}).get("official-artwork") or {}
        types = sorted(data.get("types", []), key=lambda t: t.get("slot", 0))
        return cls(
            id=data["id"],
            name=data["name"],
            types=tuple(t["type"]["name"] for t in types),
            abilities=tuple(a["ability"]["name"] for a in data.get("abilities", [])),
            base_stats={s["stat"]["name"]: s["base_stat"] for s in data.get("stats", [])},
            height=data.get("height") or 0,
            weight=data.get("weight") or 0,
            sprite=artwork.get("front_default") or sprites.get("front_default") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            "id": self.id,
            "name": self.name,
            "types": list(self.types),
            "abilities": list(self.abilities),
            "base_stats": dict(self.base_stats),
            "height": self.height,
            "weight": self.weight,
            "sprite": self.sprite,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CatalogEntry":
        """Create from dictionary"""
        return cls(
            id=int(data["id"]),
            name=data["name"],
            types=tuple(data.get("types", ())),
            abilities=tuple(data.get("abilities", ())),
            base_stats=dict(data.get("base_stats", {})),
            height=data.get("height", 0),
            weight=data.get("weight", 0),
            sprite=data.get("sprite", ""),
        )


@dataclass(frozen=True)
class EvolutionLink:
    name: str
    id: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "id": self.id}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EvolutionLink":
        return cls(name=data["name"], id=int(data["id"]))


@dataclass(frozen=True)
class DetailBundle:
    """A catalog entry joined with its species text and flattened evolution chain"""
    entry: CatalogEntry
    flavor_text: str
    genus: str
    evolution_chain: Tuple[EvolutionLink, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entry": self.entry.to_dict(),
            "flavor_text": self.flavor_text,
            "genus": self.genus,
            "evolution_chain": [link.to_dict() for link in self.evolution_chain],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DetailBundle":
        return cls(
            entry=CatalogEntry.from_dict(data["entry"]),
            flavor_text=data["flavor_text"],
            genus=data["genus"],
            evolution_chain=tuple(EvolutionLink.from_dict(link) for link in data.get("evolution_chain", [])),
        )


@dataclass(frozen=True)
class CatalogPage:
    """One page returned by the catalog client"""
    entries: Tuple[CatalogEntry, ...]
    has_next: bool


@dataclass(frozen=True)
class RosterRef:
    """A member of a type roster, before its details are fetched"""
    id: int
    url: str


@dataclass(frozen=True)
class CacheRecord:
    """A cached value stamped with the time it was captured"""
    value: Any
    captured_at: float

    def age(self, now: float) -> float:
        return now - self.captured_at

    def to_dict(self) -> Dict[str, Any]:
        return {"captured_at": self.captured_at, "value": self.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CacheRecord":
        return cls(value=data["value"], captured_at=float(data["captured_at"]))


@dataclass
class ListPayload:
    """Payload of the cached catalog list"""
    items: List[CatalogEntry] = field(default_factory=list)
    has_more: bool = True
    next_offset: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "has_more": self.has_more,
            "next_offset": self.next_offset,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ListPayload":
        return cls(
            items=[CatalogEntry.from_dict(item) for item in data["items"]],
            has_more=bool(data["has_more"]),
            next_offset=int(data["next_offset"]),
        )


@dataclass(frozen=True)
class CatalogView:
    """Read-only snapshot of the aggregated catalog list"""
    items: Tuple[CatalogEntry, ...] = ()
    has_more: bool = True
    next_offset: int = 0
    degraded: bool = False
    provisional: bool = False
    message: Optional[str] = None
    loading_more: bool = False


@dataclass(frozen=True)
class DetailResult:
    """Outcome of a detail load, flagged when it comes from a stale cache"""
    pokemon_id: int
    bundle: DetailBundle
    degraded: bool = False
    provisional: bool = False
    message: Optional[str] = None


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float
    accuracy: Optional[float] = None

    def offset(self, dlat: float, dlng: float) -> "Location":
        return Location(self.latitude + dlat, self.longitude + dlng)


@dataclass(frozen=True)
class SpawnedEntity:
    """A transient, location anchored Pokémon the hunter may catch or dismiss"""
    id: str
    entry: CatalogEntry
    location: Location
    spawned_at: float

    def age(self, now: float) -> float:
        return now - self.spawned_at

    def is_expired(self, now: float, expiry: float) -> bool:
        return self.age(now) > expiry
