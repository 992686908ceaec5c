"""Discord gateway client with a static event table."""

import sys
from typing import Awaitable, Callable, Dict, List, Tuple

import discord

Handler = Callable[..., Awaitable[None]]


def _log(msg: str):
    print(msg, file=sys.stderr)


class MirrorBot(discord.Client):
    """discord.Client whose gateway events fan out to registered handlers.

    Handlers are registered once at startup, before ``start()``:
    ``bot.register("message", handler)``. A handler registered with
    ``once=True`` runs on the first dispatch only (reconnects re-fire
    ``ready``).
    """

    def __init__(self, **discord_kwargs):
        intents = discord.Intents.default()
        intents.message_content = True
        intents.members = True
        super().__init__(intents=intents, **discord_kwargs)
        self._handlers: Dict[str, List[Tuple[Handler, bool]]] = {}
        self._spent: set = set()

    def register(self, event: str, handler: Handler, *, once: bool = False) -> None:
        self._handlers.setdefault(event, []).append((handler, once))

    def register_table(self, table: Dict[str, List[Tuple[Handler, bool]]]) -> None:
        for event, entries in table.items():
            for handler, once in entries:
                self.register(event, handler, once=once)

    async def _emit(self, event: str, *args) -> None:
        for handler, once in list(self._handlers.get(event, [])):
            if once:
                if handler in self._spent:
                    continue
                self._spent.add(handler)
            try:
                await handler(*args)
            except Exception as e:
                _log(f"[discord] {event} handler {getattr(handler, '__name__', handler)} failed: {e}")

    async def on_ready(self):
        _log(f"[discord] logged in as {self.user}")
        await self._emit("ready")

    async def on_message(self, message: discord.Message):
        await self._emit("message", message)
