"""Hunting commands for the PokeHunt cog."""
from datetime import datetime

import discord
from redbot.core import commands
from redbot.core.utils.chat_formatting import pagify

from ..constants import EMBED_COLORS, NEARBY_RADIUS_METERS
from ..models import Location
from ..utils.formatters import create_nearby_embed, format_pokemon_id, format_pokemon_name


def parse_location(latitude: float, longitude: float) -> Location:
    if not -90 <= latitude <= 90:
        raise commands.BadArgument("Latitude must be between -90 and 90.")
    if not -180 <= longitude <= 180:
        raise commands.BadArgument("Longitude must be between -180 and 180.")
    return Location(latitude, longitude)


class HuntCommands:
    """Class to handle hunting commands."""

    @commands.group(name="hunt")
    async def hunt(self, ctx: commands.Context):
        """Hunt for Pokémon around a location."""
        if ctx.invoked_subcommand is None:
            await ctx.send_help(ctx.command)

    async def _report_attempt(self, ctx: commands.Context, hunt, spawn) -> None:
        if spawn is not None:
            return  # The session announces new spawns itself
        remaining = hunt.engine.cooldown_remaining()
        if remaining > 0:
            await ctx.send(f"Nothing new yet. Pokémon may appear again in {remaining:.0f} seconds.")
        elif len(hunt.engine.live_spawns) >= hunt.engine.max_spawns:
            await ctx.send("There are already plenty of Pokémon around! Catch or dismiss some first.")
        else:
            await ctx.send("Nothing appeared this time. Keep moving!")

    @hunt.command(name="start")
    async def hunt_start(self, ctx: commands.Context, latitude: float, longitude: float):
        """Start hunting at a location."""
        location = parse_location(latitude, longitude)
        hunt = await self.get_hunt(ctx)
        hunt.start(ctx.channel, location, ctx.clean_prefix)

        await ctx.send(f"{ctx.author.mention} is now hunting! Report your position with `{ctx.clean_prefix}hunt move`.")
        async with ctx.typing():
            spawn = await hunt.engine.try_spawn(location)
        await self._report_attempt(ctx, hunt, spawn)

    @hunt.command(name="move")
    async def hunt_move(self, ctx: commands.Context, latitude: float, longitude: float):
        """Report a new location while hunting."""
        hunt = await self.get_hunt(ctx)
        if not hunt.hunting:
            await ctx.send(f"You aren't hunting! Use `{ctx.clean_prefix}hunt start <lat> <lng>` first.")
            return

        hunt.location = parse_location(latitude, longitude)
        async with ctx.typing():
            spawn = await hunt.engine.try_spawn(hunt.location)
        await self._report_attempt(ctx, hunt, spawn)

    @hunt.command(name="nearby")
    async def hunt_nearby(self, ctx: commands.Context, radius: float = NEARBY_RADIUS_METERS):
        """List the Pokémon around you."""
        hunt = await self.get_hunt(ctx)
        if hunt.location is None:
            await ctx.send(f"I don't know where you are. Use `{ctx.clean_prefix}hunt start <lat> <lng>`.")
            return
        if radius <= 0:
            await ctx.send("Radius must be positive.")
            return

        spawns = hunt.engine.nearby(hunt.location, radius)
        await ctx.send(embed=create_nearby_embed(spawns, hunt.location, radius))

    @hunt.command(name="catch", aliases=["c"])
    async def hunt_catch(self, ctx: commands.Context, spawn_id: str):
        """Catch a Pokémon that spawned near you."""
        hunt = await self.get_hunt(ctx)
        spawn = hunt.engine.get_spawn(spawn_id)
        if spawn is None or not hunt.engine.remove_spawn(spawn_id):
            await ctx.send("That Pokémon isn't here anymore. It may have fled!")
            return

        entry = spawn.entry
        async with self.config.user(ctx.author).caught() as caught:
            record = caught.setdefault(
                str(entry.id),
                {"name": entry.name, "count": 0, "first_caught_at": datetime.now().timestamp()},
            )
            record["count"] += 1

        embed = discord.Embed(
            title=f"Gotcha! {ctx.author.name} caught {format_pokemon_name(entry.name)}!",
            description=f"{format_pokemon_id(entry.id)} has been added to your collection.",
            color=EMBED_COLORS["success"],
        )
        if entry.sprite:
            embed.set_thumbnail(url=entry.sprite)
        await ctx.send(embed=embed)

    @hunt.command(name="dismiss")
    async def hunt_dismiss(self, ctx: commands.Context, spawn_id: str):
        """Let a Pokémon go."""
        hunt = await self.get_hunt(ctx)
        spawn = hunt.engine.get_spawn(spawn_id)
        hunt.engine.remove_spawn(spawn_id)
        if spawn is None:
            await ctx.send("That Pokémon already left.")
        else:
            await ctx.send(f"{format_pokemon_name(spawn.entry.name)} wandered off.")

    @hunt.command(name="stop")
    async def hunt_stop(self, ctx: commands.Context):
        """Stop hunting and clear your spawns."""
        hunt = await self.get_hunt(ctx)
        hunt.stop()
        self.sessions.discard_if_idle(ctx.author.id)
        await ctx.send("You stopped hunting. All nearby Pokémon have fled!")

    @hunt.command(name="caught")
    async def hunt_caught(self, ctx: commands.Context):
        """Show the Pokémon you've caught."""
        caught = await self.config.user(ctx.author).caught()
        if not caught:
            await ctx.send("You haven't caught any Pokémon yet!")
            return

        lines = []
        for pokemon_id, record in sorted(caught.items(), key=lambda item: int(item[0])):
            line = f"{format_pokemon_id(int(pokemon_id))} {format_pokemon_name(record['name'])}"
            if record["count"] > 1:
                line += f" x{record['count']}"
            lines.append(line)

        header = f"{ctx.author.name} has caught {len(caught)} different Pokémon:\n"
        for page in pagify(header + "\n".join(lines)):
            await ctx.send(page)
