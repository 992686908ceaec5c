"""Discord adapter — the push side of the mirror."""

from mirrorbot.adapters.discord.bot import MirrorBot
from mirrorbot.adapters.discord.normalize import normalize_discord_message
from mirrorbot.adapters.discord.sender import DiscordChannelSender

__all__ = ["MirrorBot", "DiscordChannelSender", "normalize_discord_message"]
