"""Command modules for the PokeHunt cog."""
from ..utils.formatters import create_help_embed
from .dex import DexCommands
from .hunt import HuntCommands
from .settings import SettingsCommands

__all__ = ["DexCommands", "HuntCommands", "SettingsCommands", "create_help_embed"]
