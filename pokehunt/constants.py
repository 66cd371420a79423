"""Constants for the PokeHunt cog."""

# Catalog API
POKE_API_URL = "https://pokeapi.co/api/v2"
PAGE_SIZE = 20  # Entries per catalog page
REQUEST_TIMEOUT = 15  # Seconds before an upstream request is abandoned

# Cache constants
CACHE_TTL = 12 * 60 * 60  # Records are fresh for 12 hours
CACHE_RETENTION = 50  # Records kept per key family when storage is full
CACHE_MAX_ENTRIES = 500  # Default capacity of the Config backed store
LIST_CACHE_NAMESPACE = "cache:pokemon:list:v1"
DETAIL_CACHE_NAMESPACE = "cache:pokemon:detail"
SHARED_SCOPE = "shared"  # Scope used for data that is identical for every user

# Spawn constants
SPAWN_RADIUS_METERS = 100  # Spawns land within 100m of the hunter
SPAWN_COOLDOWN = 30  # Seconds between successful spawns
MAX_SPAWNS = 10  # Live spawns allowed at once
SPAWN_EXPIRY = 5 * 60  # Spawns flee after 5 minutes
NEARBY_RADIUS_METERS = 200  # Default search radius for nearby spawns
MAX_SESSIONS = 200  # Idle hunting sessions kept in memory

# Geodesy
EARTH_RADIUS_METERS = 6371000
METERS_PER_DEGREE = 111000  # 1 degree is roughly 111km

# Admin setting ranges
MIN_COOLDOWN_SETTING = 0
MAX_COOLDOWN_SETTING = 600
MIN_RADIUS_SETTING = 10
MAX_RADIUS_SETTING = 1000
MIN_MAX_SPAWNS_SETTING = 1
MAX_MAX_SPAWNS_SETTING = 25

POKEMON_TYPES = [
    "normal",
    "fire",
    "water",
    "grass",
    "electric",
    "ice",
    "fighting",
    "poison",
    "ground",
    "flying",
    "psychic",
    "bug",
    "rock",
    "ghost",
    "dark",
    "dragon",
    "steel",
    "fairy",
]

# Types that appear in each biome
BIOME_TYPES = {
    "urban": ("normal", "electric", "poison", "psychic"),
    "rural": ("normal", "grass", "ground", "bug"),
    "water": ("water", "ice", "flying"),
    "forest": ("grass", "bug", "flying", "normal"),
    "mountain": ("rock", "ground", "ice", "steel"),
    "unknown": ("normal",),
}
DEFAULT_SPAWN_TYPES = ("normal",)

NO_FLAVOR_TEXT = "No flavor data found for this Pokémon."
DEFAULT_GENUS = "Pokémon"

# Messages shown when cached data stands in for a failed fetch
DEGRADED_LIST_MESSAGE = "Showing cached data - refresh when the Pokédex is reachable again."
DEGRADED_DETAIL_MESSAGE = "Showing cached data - refresh to try again."

# Embed colors
EMBED_COLORS = {
    "success": 0x00FF00,
    "warning": 0xFF9900,
    "error": 0xFF0000,
    "info": 0x3498DB,
}

TYPE_COLORS = {
    "normal": 0xA8A77A,
    "fire": 0xEE8130,
    "water": 0x6390F0,
    "grass": 0x7AC74C,
    "electric": 0xF7D02C,
    "ice": 0x96D9D6,
    "fighting": 0xC22E28,
    "poison": 0xA33EA1,
    "ground": 0xE2BF65,
    "flying": 0xA98FF3,
    "psychic": 0xF95587,
    "bug": 0xA6B91A,
    "rock": 0xB6A136,
    "ghost": 0x735797,
    "dark": 0x705746,
    "dragon": 0x6F35FC,
    "steel": 0xB7B7CE,
    "fairy": 0xD685AD,
}
