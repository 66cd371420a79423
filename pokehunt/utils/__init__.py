"""Core modules of the PokeHunt cog.

- api.py: Remote catalog client for PokeAPI
- cache.py: Time-bounded cache store
- storage.py: Key/value storage backends for the cache store
- aggregator.py: Paginated catalog list with offline fallback
- details.py: Detail bundle cache
- geo.py: Distance and spawn placement helpers
- biome.py: Coordinate to biome classifier
- spawn.py: Location based spawn engine
- search.py: Filtering over the loaded catalog
- formatters.py: Display helpers and embeds (imported by the cog only)
"""

from .aggregator import ListAggregator, merge_by_id
from .api import CatalogClient, extract_id_from_url, flatten_evolution_chain, sanitize_flavor_text
from .biome import Biome, classify, types_for
from .cache import CacheStore
from .details import DetailCache
from .geo import distance_meters, offset_location, random_offset
from .search import available_types, filter_entries, find_pokemon_id
from .spawn import SpawnEngine, SpawnState
from .storage import ConfigStorage, MemoryStorage

__all__ = [
    # Catalog
    'CatalogClient',
    'extract_id_from_url',
    'flatten_evolution_chain',
    'sanitize_flavor_text',

    # Caching
    'CacheStore',
    'ConfigStorage',
    'MemoryStorage',
    'ListAggregator',
    'merge_by_id',
    'DetailCache',

    # Spawning
    'Biome',
    'classify',
    'types_for',
    'distance_meters',
    'offset_location',
    'random_offset',
    'SpawnEngine',
    'SpawnState',

    # Search
    'available_types',
    'filter_entries',
    'find_pokemon_id',
]
