"""Port interfaces (Hexagonal Architecture)."""

from mirrorbot.ports.inbound import DISCORD, SLACK, AttachmentRef, Mirror, NormalizedMessage
from mirrorbot.ports.outbound import (
    ChatSendPort,
    DeliveryResult,
    HistoryPort,
    TransferPort,
    TransferredFile,
)

__all__ = [
    "DISCORD",
    "SLACK",
    "AttachmentRef",
    "Mirror",
    "NormalizedMessage",
    "ChatSendPort",
    "DeliveryResult",
    "HistoryPort",
    "TransferPort",
    "TransferredFile",
]
