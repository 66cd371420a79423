"""Main PokeHunt cog implementation."""
import asyncio
import logging
from typing import Optional

import aiohttp
import discord
from redbot.core import Config, commands
from redbot.core.bot import Red

from .constants import (
    CACHE_MAX_ENTRIES,
    EMBED_COLORS,
    LIST_CACHE_NAMESPACE,
    MAX_SPAWNS,
    SPAWN_COOLDOWN,
    SPAWN_RADIUS_METERS,
)
from .exceptions import CatalogFetchError

# Import command modules
from .commands import create_help_embed
from .commands.dex import DexCommands
from .commands.hunt import HuntCommands
from .commands.settings import SettingsCommands

from .session import HuntSession, SessionRegistry
from .utils.api import CatalogClient
from .utils.cache import CacheStore
from .utils.storage import ConfigStorage

log = logging.getLogger("red.pokehunt")


class PokeHuntCog(
    commands.Cog,
    DexCommands,
    HuntCommands,
    SettingsCommands,
):
    """Browse the Pokédex and hunt Pokémon around a location!"""

    def __init__(self, bot: Red):
        self.bot = bot
        self.config = Config.get_conf(
            self, identifier=7315602284119, force_registration=True
        )

        default_global = {
            "cache": {},  # {cache_key: json encoded CacheRecord}
            "cache_max_entries": CACHE_MAX_ENTRIES,
        }

        default_guild = {
            "spawn_cooldown": SPAWN_COOLDOWN,
            "spawn_radius": SPAWN_RADIUS_METERS,
            "max_spawns": MAX_SPAWNS,
        }

        default_user = {
            "caught": {},  # {pokemon_id: {"name": name, "count": n, "first_caught_at": timestamp}}
        }

        self.config.register_global(**default_global)
        self.config.register_guild(**default_guild)
        self.config.register_user(**default_user)

        self.session = aiohttp.ClientSession()
        self.client = CatalogClient(self.session)
        self.storage = ConfigStorage(self.config, CACHE_MAX_ENTRIES)
        self.cache = CacheStore(self.storage)
        self.sessions = SessionRegistry()  # {user_id: HuntSession}, idle ones evicted first

    async def cog_load(self):
        """Apply the configured cache capacity."""
        self.storage.max_entries = await self.config.cache_max_entries()

    def cog_unload(self):
        """Clean up when the cog is unloaded."""
        for hunt in self.sessions.values():
            hunt.stop()
        asyncio.create_task(self._close())

    async def _close(self):
        await asyncio.gather(*(hunt.details.drain() for hunt in self.sessions.values()))
        await self.session.close()

    async def get_hunt(self, ctx: commands.Context) -> HuntSession:
        """Return the caller's session, creating it with the guild's spawn settings."""
        hunt = self.sessions.get(ctx.author.id)
        if hunt is not None:
            return hunt

        guild_id: Optional[int] = ctx.guild.id if ctx.guild else None
        if ctx.guild:
            settings = await self.config.guild(ctx.guild).all()
        else:
            settings = {
                "spawn_cooldown": SPAWN_COOLDOWN,
                "spawn_radius": SPAWN_RADIUS_METERS,
                "max_spawns": MAX_SPAWNS,
            }

        hunt = HuntSession(
            ctx.author.id,
            self.client,
            self.cache,
            guild_id=guild_id,
            cooldown=settings["spawn_cooldown"],
            radius=settings["spawn_radius"],
            max_spawns=settings["max_spawns"],
            prefix=ctx.clean_prefix,
        )
        self.sessions.add(hunt)
        return hunt

    @commands.command(name="pokehunt")
    async def pokehunt_help(self, ctx: commands.Context):
        """Show what PokeHunt can do."""
        await ctx.send(embed=create_help_embed(ctx.clean_prefix))

    async def cog_command_error(self, ctx: commands.Context, error: commands.CommandError):
        """Turn catalog outages into a readable message."""
        original = getattr(error, "original", error)
        if isinstance(original, CatalogFetchError):
            embed = discord.Embed(
                title="Pokédex unavailable",
                description=f"{original}\nTry again in a moment.",
                color=EMBED_COLORS["error"],
            )
            await ctx.send(embed=embed)
            return
        if isinstance(original, commands.BadArgument):
            await ctx.send(str(original))
            return
        if isinstance(error, commands.CommandInvokeError):
            log.exception(f"Unexpected error in {ctx.command}: {type(original).__name__}: {original}", exc_info=original)
        await self.bot.on_command_error(ctx, error, unhandled_by_cog=True)

    async def red_delete_data_for_user(self, *, requester, user_id: int):
        """Forget a user's caught Pokémon, cached browsing state and session."""
        await self.config.user_from_id(user_id).clear()

        hunt = self.sessions.pop(user_id, None)
        if hunt is not None:
            hunt.stop()

        keys = await self.storage.list_keys(f"{LIST_CACHE_NAMESPACE}:{user_id}:")
        await self.storage.remove_many(keys)
