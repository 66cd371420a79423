"""Pokédex browsing commands for the PokeHunt cog."""
from typing import List, Optional

import discord
from redbot.core import commands
from redbot.core.utils.menus import menu, DEFAULT_CONTROLS

from ..constants import PAGE_SIZE
from ..models import CatalogEntry, CatalogView
from ..utils.formatters import create_detail_embed, create_list_embed
from ..utils.search import available_types, filter_entries, find_pokemon_id


def paginate_entries(view: CatalogView, entries: List[CatalogEntry], title: str) -> List[discord.Embed]:
    pages = []
    for start in range(0, len(entries), PAGE_SIZE):
        embed = create_list_embed(view, entries[start:start + PAGE_SIZE], title=title)
        pages.append(embed)
    return pages or [create_list_embed(view, [], title=title)]


class DexCommands:
    """Class to handle Pokédex commands."""

    @commands.group(name="dex", aliases=["pokedex"])
    async def dex(self, ctx: commands.Context):
        """Browse the Pokédex."""
        if ctx.invoked_subcommand is None:
            await ctx.send_help(ctx.command)

    async def _ensure_loaded(self, ctx: commands.Context) -> CatalogView:
        hunt = await self.get_hunt(ctx)
        view = hunt.catalog.snapshot()
        if not view.items or view.provisional:
            async with ctx.typing():
                view = await hunt.catalog.load_initial()
        return view

    @dex.command(name="list")
    async def dex_list(self, ctx: commands.Context, page: int = 1):
        """Show a page of the Pokédex, loading more pages as needed."""
        if page < 1:
            await ctx.send("Pages start at 1.")
            return

        hunt = await self.get_hunt(ctx)
        view = await self._ensure_loaded(ctx)
        needed = page * PAGE_SIZE
        async with ctx.typing():
            while len(view.items) < needed and view.has_more:
                before = len(view.items)
                view = await hunt.catalog.load_more()
                if len(view.items) == before:
                    break

        start = (page - 1) * PAGE_SIZE
        entries = list(view.items[start:start + PAGE_SIZE])
        if not entries:
            await ctx.send("That page is past the end of the Pokédex.")
            return
        await ctx.send(embed=create_list_embed(view, entries, title=f"Pokédex - page {page}"))

    @dex.command(name="more")
    async def dex_more(self, ctx: commands.Context):
        """Load the next page of the Pokédex."""
        hunt = await self.get_hunt(ctx)
        view = await self._ensure_loaded(ctx)
        if not view.has_more:
            await ctx.send("You've reached the end of the Pokédex!")
            return

        before = len(view.items)
        async with ctx.typing():
            view = await hunt.catalog.load_more()
        entries = list(view.items[before:])
        if not entries:
            await ctx.send("A page is already loading, try again in a moment.")
            return
        await ctx.send(embed=create_list_embed(view, entries, title="Pokédex - new entries"))

    async def _resolve(self, ctx: commands.Context, pokemon: str) -> Optional[int]:
        # Numbers resolve without touching the list, names need it loaded
        pokemon_id = find_pokemon_id((), pokemon)
        if pokemon_id is None:
            view = await self._ensure_loaded(ctx)
            pokemon_id = find_pokemon_id(view.items, pokemon)
        if pokemon_id is None:
            await ctx.send(
                f"I haven't loaded a Pokémon named `{pokemon.strip()}` yet. Try its Pokédex number."
            )
        return pokemon_id

    @dex.command(name="refresh")
    async def dex_refresh(self, ctx: commands.Context, *, pokemon: Optional[str] = None):
        """Reload the Pokédex, or one Pokémon's details, from PokeAPI."""
        hunt = await self.get_hunt(ctx)
        if pokemon:
            pokemon_id = await self._resolve(ctx, pokemon)
            if pokemon_id is None:
                return
            async with ctx.typing():
                result = await hunt.details.load(pokemon_id, skip_cache=True)
            await ctx.send(embed=create_detail_embed(result))
            return

        async with ctx.typing():
            view = await hunt.catalog.refresh()
        if view.degraded:
            await ctx.send(view.message)
            return
        await ctx.send(f"Pokédex refreshed, {len(view.items)} Pokémon loaded.")

    @dex.command(name="info")
    async def dex_info(self, ctx: commands.Context, *, pokemon: str):
        """Show details for a Pokémon by Pokédex number or name."""
        hunt = await self.get_hunt(ctx)
        pokemon_id = await self._resolve(ctx, pokemon)
        if pokemon_id is None:
            return

        async with ctx.typing():
            result = await hunt.details.load(pokemon_id)
        await ctx.send(embed=create_detail_embed(result))

    @dex.command(name="search")
    async def dex_search(self, ctx: commands.Context, *, text: str):
        """Search loaded Pokémon by name, number, type or ability."""
        view = await self._ensure_loaded(ctx)
        results = filter_entries(view.items, text=text)
        if not results:
            await ctx.send(f"No loaded Pokémon match `{text}`.")
            return
        pages = paginate_entries(view, results, title=f"Search: {text}")
        await menu(ctx, pages, DEFAULT_CONTROLS)

    @dex.command(name="type")
    async def dex_type(self, ctx: commands.Context, type_name: str):
        """Show loaded Pokémon of one type."""
        view = await self._ensure_loaded(ctx)
        type_name = type_name.lower()
        known = available_types(view.items)
        if type_name not in known:
            await ctx.send(f"Unknown type! Choose from: {', '.join(known)}")
            return

        results = filter_entries(view.items, type_name=type_name)
        if not results:
            await ctx.send(f"No {type_name} Pokémon loaded yet. Try `{ctx.clean_prefix}dex more`.")
            return
        pages = paginate_entries(view, results, title=f"{type_name.capitalize()} Pokémon")
        await menu(ctx, pages, DEFAULT_CONTROLS)
