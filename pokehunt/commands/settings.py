"""Settings commands for the PokeHunt cog."""
import discord
from redbot.core import commands

from ..constants import (
    MAX_COOLDOWN_SETTING,
    MAX_MAX_SPAWNS_SETTING,
    MAX_RADIUS_SETTING,
    MIN_COOLDOWN_SETTING,
    MIN_MAX_SPAWNS_SETTING,
    MIN_RADIUS_SETTING,
)


class SettingsCommands:
    """Class to handle PokeHunt settings commands."""

    @commands.group(name="huntset")
    @commands.guild_only()
    @commands.admin_or_permissions(manage_guild=True)
    async def hunt_settings(self, ctx: commands.Context):
        """Configure hunting in this server."""
        if ctx.invoked_subcommand is None:
            await ctx.send_help(ctx.command)

    def _guild_sessions(self, guild: discord.Guild):
        return [hunt for hunt in self.sessions.values() if hunt.guild_id == guild.id]

    @hunt_settings.command(name="cooldown")
    async def set_cooldown(self, ctx: commands.Context, seconds: int):
        """Set the seconds between spawns (0 to 600, default is 30)."""
        if seconds < MIN_COOLDOWN_SETTING or seconds > MAX_COOLDOWN_SETTING:
            await ctx.send(f"Cooldown must be between {MIN_COOLDOWN_SETTING} and {MAX_COOLDOWN_SETTING} seconds.")
            return

        await self.config.guild(ctx.guild).spawn_cooldown.set(seconds)
        for hunt in self._guild_sessions(ctx.guild):
            hunt.engine.cooldown = seconds
        await ctx.send(f"Spawn cooldown set to {seconds} seconds.")

    @hunt_settings.command(name="radius")
    async def set_radius(self, ctx: commands.Context, meters: int):
        """Set how far from a hunter Pokémon spawn (10 to 1000, default is 100)."""
        if meters < MIN_RADIUS_SETTING or meters > MAX_RADIUS_SETTING:
            await ctx.send(f"Radius must be between {MIN_RADIUS_SETTING} and {MAX_RADIUS_SETTING} meters.")
            return

        await self.config.guild(ctx.guild).spawn_radius.set(meters)
        for hunt in self._guild_sessions(ctx.guild):
            hunt.engine.radius = meters
        await ctx.send(f"Spawn radius set to {meters} meters.")

    @hunt_settings.command(name="maxspawns")
    async def set_max_spawns(self, ctx: commands.Context, count: int):
        """Set how many Pokémon can be around a hunter at once (1 to 25, default is 10)."""
        if count < MIN_MAX_SPAWNS_SETTING or count > MAX_MAX_SPAWNS_SETTING:
            await ctx.send(f"Max spawns must be between {MIN_MAX_SPAWNS_SETTING} and {MAX_MAX_SPAWNS_SETTING}.")
            return

        await self.config.guild(ctx.guild).max_spawns.set(count)
        for hunt in self._guild_sessions(ctx.guild):
            hunt.engine.max_spawns = count
        await ctx.send(f"Max spawns set to {count}.")

    @hunt_settings.command(name="cachesize")
    @commands.is_owner()
    async def set_cache_size(self, ctx: commands.Context, entries: int):
        """Set how many records the Pokédex cache may hold (bot owner only)."""
        if entries < 1:
            await ctx.send("The cache needs room for at least one record.")
            return

        await self.config.cache_max_entries.set(entries)
        self.storage.max_entries = entries
        await ctx.send(f"The Pokédex cache now holds up to {entries} records.")

    @hunt_settings.command(name="show")
    async def show_settings(self, ctx: commands.Context):
        """Show current hunting settings."""
        guild_config = await self.config.guild(ctx.guild).all()

        embed = discord.Embed(
            title=f"Hunting Settings for {ctx.guild.name}",
            color=0x3498db
        )
        embed.add_field(name="Spawn Cooldown", value=f"{guild_config['spawn_cooldown']} seconds", inline=True)
        embed.add_field(name="Spawn Radius", value=f"{guild_config['spawn_radius']} meters", inline=True)
        embed.add_field(name="Max Spawns", value=str(guild_config["max_spawns"]), inline=True)
        embed.add_field(name="Cache Capacity", value=f"{self.storage.max_entries} records", inline=True)

        await ctx.send(embed=embed)
