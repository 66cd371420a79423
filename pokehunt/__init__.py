"""PokeHunt cog for Red-DiscordBot."""

__red_end_user_data_statement__ = (
    "This cog stores which Pokémon each user has caught and when, and caches "
    "Pokédex data fetched from PokeAPI for that user's browsing session. Live "
    "spawns and hunting locations are kept in memory only. This data can be "
    "removed with a data deletion request."
)


async def setup(bot) -> None:
    """Load the PokeHuntCog."""
    from .pokehunt import PokeHuntCog

    cog = PokeHuntCog(bot)
    await bot.add_cog(cog)
