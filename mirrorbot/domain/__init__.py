"""Domain layer — pure Python, no framework dependencies."""

from mirrorbot.domain.cursor import CursorStore, RelayState, token_key
from mirrorbot.domain.listener import EventListener
from mirrorbot.domain.relay import RelayLoop
from mirrorbot.domain.router import MirrorRouter

__all__ = [
    "CursorStore",
    "RelayState",
    "token_key",
    "EventListener",
    "RelayLoop",
    "MirrorRouter",
]
