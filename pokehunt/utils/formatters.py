"""Formatting utility functions for the PokeHunt cog."""
import discord
from typing import Optional, Sequence

from ..constants import EMBED_COLORS, TYPE_COLORS
from ..models import CatalogEntry, CatalogView, DetailResult, Location, SpawnedEntity
from .geo import distance_meters

REGIONAL_FORMS = {"alola": "Alolan", "galar": "Galarian", "hisui": "Hisuian"}


def capitalize(value: str) -> str:
    if not value:
        return ""
    return value[0].upper() + value[1:]


def format_pokemon_id(pokemon_id: int) -> str:
    """Format an id the way the Pokédex shows it, e.g. ``#025``."""
    return f"#{pokemon_id:03d}"


def format_pokemon_name(name: str) -> str:
    """Format a Pokemon slug for display, including special forms.

    Args:
        name: The PokeAPI slug, e.g. ``charizard-mega-x`` or ``vulpix-alola``

    Returns:
        Formatted display name
    """
    if "-" not in name:
        return capitalize(name)

    base_name, form = name.split("-", 1)
    base_name = capitalize(base_name)

    if form == "mega":
        return f"Mega {base_name}"
    elif form.startswith("mega-"):
        return f"Mega {base_name} {form.split('-')[1].upper()}"
    elif form == "gmax":
        return f"Gigantamax {base_name}"
    elif form in REGIONAL_FORMS:
        return f"{REGIONAL_FORMS[form]} {base_name}"
    elif form == "primal":
        return f"Primal {base_name}"

    return " ".join(capitalize(part) for part in name.split("-"))


def format_types(types: Sequence[str]) -> str:
    return " / ".join(capitalize(t) for t in types) or "Unknown"


def distance_text(distance: float) -> str:
    if distance < 50:
        return "very close"
    if distance < 100:
        return "nearby"
    return "in the area"


def format_location(location: Location) -> str:
    return f"{location.latitude:.5f}, {location.longitude:.5f}"


def entry_color(entry: CatalogEntry) -> int:
    if entry.types:
        return TYPE_COLORS.get(entry.types[0], EMBED_COLORS["info"])
    return EMBED_COLORS["info"]


def create_list_embed(view: CatalogView, entries: Sequence[CatalogEntry], title: str = "Pokédex") -> discord.Embed:
    """Create an embed listing catalog entries, flagging cached data."""
    lines = [
        f"`{format_pokemon_id(entry.id)}` **{format_pokemon_name(entry.name)}** - {format_types(entry.types)}"
        for entry in entries
    ]
    embed = discord.Embed(
        title=title,
        description="\n".join(lines) or "No Pokémon match.",
        color=EMBED_COLORS["warning"] if view.degraded else EMBED_COLORS["info"],
    )

    footer = f"{len(view.items)} loaded"
    if view.has_more:
        footer += " - more available"
    if view.degraded and view.message:
        footer += f" - {view.message}"
    embed.set_footer(text=footer)
    return embed


def create_detail_embed(result: DetailResult) -> discord.Embed:
    """Create an embed for a detail bundle."""
    bundle = result.bundle
    entry = bundle.entry

    embed = discord.Embed(
        title=f"{format_pokemon_name(entry.name)} {format_pokemon_id(entry.id)}",
        description=f"*{bundle.genus}*\n{bundle.flavor_text}",
        color=entry_color(entry),
    )
    if entry.sprite:
        embed.set_thumbnail(url=entry.sprite)

    embed.add_field(name="Types", value=format_types(entry.types), inline=True)
    embed.add_field(name="Height", value=f"{entry.height / 10:.1f} m", inline=True)
    embed.add_field(name="Weight", value=f"{entry.weight / 10:.1f} kg", inline=True)

    if entry.abilities:
        embed.add_field(
            name="Abilities",
            value=", ".join(format_pokemon_name(a) for a in entry.abilities),
            inline=False,
        )

    if entry.base_stats:
        stats = "\n".join(f"{name.replace('-', ' ').title()}: {value}" for name, value in entry.base_stats.items())
        embed.add_field(name="Base Stats", value=stats, inline=False)

    if bundle.evolution_chain:
        chain = " → ".join(format_pokemon_name(link.name) for link in bundle.evolution_chain)
        embed.add_field(name="Evolution Chain", value=chain, inline=False)

    if result.degraded and result.message:
        embed.set_footer(text=result.message)
    return embed


def create_spawn_embed(prefix: str, spawn: SpawnedEntity, origin: Optional[Location] = None) -> discord.Embed:
    """Create an embed announcing a spawn.

    Args:
        prefix: The bot's command prefix
        spawn: The spawned entity
        origin: Where the hunter stands, used for the distance line

    Returns:
        Discord Embed with spawn information
    """
    display_name = format_pokemon_name(spawn.entry.name)
    description = f"Type `{prefix}hunt catch {spawn.id}` to catch it!"
    if origin is not None:
        distance = distance_meters(origin, spawn.location)
        description = f"It is {distance_text(distance)} ({distance:.0f}m away).\n" + description

    embed = discord.Embed(
        title=f"A wild {display_name} appeared!",
        description=description,
        color=EMBED_COLORS["success"],
    )
    if spawn.entry.sprite:
        embed.set_image(url=spawn.entry.sprite)
    embed.set_footer(text=f"Spawned at {format_location(spawn.location)}")
    return embed


def create_nearby_embed(spawns: Sequence[SpawnedEntity], origin: Location, radius: float) -> discord.Embed:
    """Create an embed listing spawns around the hunter, closest first."""
    ranked = sorted(spawns, key=lambda s: distance_meters(origin, s.location))
    lines = [
        f"`{spawn.id}` **{format_pokemon_name(spawn.entry.name)}** - "
        f"{distance_meters(origin, spawn.location):.0f}m"
        for spawn in ranked
    ]
    return discord.Embed(
        title=f"Pokémon within {radius:.0f}m",
        description="\n".join(lines) or "Nothing around here right now.",
        color=EMBED_COLORS["info"],
    )


def create_help_embed(prefix: str) -> discord.Embed:
    """Create a help embed for PokeHunt commands."""
    embed = discord.Embed(
        title="PokeHunt Commands",
        description="Browse the Pokédex and hunt Pokémon around you!",
        color=EMBED_COLORS["info"]
    )

    embed.add_field(
        name="Pokédex",
        value=f"• `{prefix}dex list [page]` - Browse the Pokédex\n"
              f"• `{prefix}dex more` - Load the next page\n"
              f"• `{prefix}dex refresh [id or name]` - Reload the list, or one Pokémon, from PokeAPI\n"
              f"• `{prefix}dex info <id or name>` - Show details\n"
              f"• `{prefix}dex search <text>` - Search loaded Pokémon\n"
              f"• `{prefix}dex type <type>` - Filter loaded Pokémon by type",
        inline=False
    )

    embed.add_field(
        name="Hunting",
        value=f"• `{prefix}hunt start <lat> <lng>` - Start hunting at a location\n"
              f"• `{prefix}hunt move <lat> <lng>` - Report a new location\n"
              f"• `{prefix}hunt nearby [radius]` - List spawns around you\n"
              f"• `{prefix}hunt catch <spawn id>` - Catch a spawn\n"
              f"• `{prefix}hunt dismiss <spawn id>` - Let a spawn go\n"
              f"• `{prefix}hunt stop` - Stop hunting\n"
              f"• `{prefix}hunt caught` - Your collection",
        inline=False
    )

    embed.add_field(
        name="Admin Settings",
        value=f"• `{prefix}huntset cooldown <seconds>`\n"
              f"• `{prefix}huntset radius <meters>`\n"
              f"• `{prefix}huntset maxspawns <count>`\n"
              f"• `{prefix}huntset cachesize <records>` (bot owner)\n"
              f"• `{prefix}huntset show`",
        inline=False
    )

    return embed
