"""Mirror Bot — Discord <-> Slack channel mirror."""

from mirrorbot.config import AppConfig, ConfigError, __version__
from mirrorbot.ports import AttachmentRef, DeliveryResult, Mirror, NormalizedMessage
from mirrorbot.domain import CursorStore, EventListener, MirrorRouter, RelayLoop, RelayState

__all__ = [
    "__version__",
    "AppConfig",
    "ConfigError",
    "AttachmentRef",
    "DeliveryResult",
    "Mirror",
    "NormalizedMessage",
    "CursorStore",
    "EventListener",
    "MirrorRouter",
    "RelayLoop",
    "RelayState",
]
