"""Launcher — wires the Discord client, Slack client and relay loops together."""

import asyncio
import functools
import sys
from typing import List, Optional

import discord

from mirrorbot.adapters.discord import DiscordChannelSender, MirrorBot, normalize_discord_message
from mirrorbot.adapters.media import AttachmentTransfer, encode_sticker
from mirrorbot.adapters.slack import SlackClient, normalize_slack_message
from mirrorbot.adapters.web import create_app, start_keep_alive
from mirrorbot.config import AppConfig, ConfigError
from mirrorbot.domain import EventListener, MirrorRouter, RelayLoop


def _log(msg: str):
    print(msg, file=sys.stderr)


class MirrorService:
    """Holds every long-lived component of a running bridge."""

    def __init__(self, config: AppConfig, bot: Optional[MirrorBot] = None, slack: Optional[SlackClient] = None):
        self.config = config
        self.router = MirrorRouter(config.mirrors())
        self.bot = bot or MirrorBot()
        self.slack = slack or SlackClient(config.slack.token, timeout=config.relay.http_timeout)
        self.transfer = AttachmentTransfer(config.relay.tmp_dir, timeout=config.relay.http_timeout)
        self.listener = EventListener(
            self.router,
            sender=self.slack,
            transfer=self.transfer,
            encode_sticker=encode_sticker,
        )
        discord_sender = DiscordChannelSender(self.bot, timeout=config.relay.http_timeout)
        normalize = functools.partial(normalize_slack_message, auth_header=self.slack.auth_header)
        self.relays: List[RelayLoop] = [
            RelayLoop(
                mirror,
                self.router,
                history=self.slack,
                sender=discord_sender,
                transfer=self.transfer,
                normalize=normalize,
                interval=config.relay.poll_interval,
            )
            for mirror in self.router.mirrors
        ]
        self._web_task: Optional[asyncio.Task] = None
        self.bot.register_table(self.event_table())

    def event_table(self):
        """Static gateway event -> [(handler, once)] mapping."""
        return {
            "ready": [(self.on_ready, True)],
            "message": [(self.on_message, False)],
        }

    async def on_ready(self):
        _log(f"Discord bot is ready, mirroring {len(self.relays)} channel pair(s)")
        for loop in self.relays:
            await loop.start()

    async def on_message(self, message: discord.Message):
        await self.listener.handle(normalize_discord_message(message))

    async def run(self):
        if self.config.keep_alive:
            self._web_task = start_keep_alive(create_app(self.relays, self.listener), self.config.port)
        try:
            await self.bot.start(self.config.discord.token)
        finally:
            await self.shutdown()

    async def shutdown(self):
        for loop in self.relays:
            await loop.stop()
        if self._web_task is not None:
            self._web_task.cancel()
            self._web_task = None
        if not self.bot.is_closed():
            await self.bot.close()


def main(environ=None) -> int:
    """Entry point; returns the process exit status."""
    try:
        config = AppConfig.from_env(environ).validate()
    except ConfigError as e:
        _log(f"Configuration error: {e}")
        return 1

    service = MirrorService(config)
    try:
        asyncio.run(service.run())
    except KeyboardInterrupt:
        _log("Interrupted, shutting down")
    except discord.LoginFailure as e:
        _log(f"Failed to login: {e}")
        return 1
    except Exception as e:
        _log(f"Bridge crashed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
