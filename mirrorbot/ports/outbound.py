"""Outbound ports — interfaces for external system adapters."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, AsyncContextManager, Dict, List, Optional, Protocol, runtime_checkable

from mirrorbot.ports.inbound import AttachmentRef, ChannelId


@dataclass
class DeliveryResult:
    """Unified result type for send operations."""

    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


@dataclass
class TransferredFile:
    """A fully written local copy of a remote attachment."""

    path: Path
    filename: str
    size: int


@runtime_checkable
class ChatSendPort(Protocol):
    """Interface for posting into a destination channel."""

    async def send_text(self, channel_id: ChannelId, text: str) -> DeliveryResult: ...

    async def send_file(
        self,
        channel_id: ChannelId,
        file: TransferredFile,
        text: Optional[str] = None,
    ) -> DeliveryResult: ...


@runtime_checkable
class HistoryPort(Protocol):
    """Interface for the polled side's history and user directory."""

    async def history(self, channel_id: str, oldest: str) -> List[Dict[str, Any]]: ...

    async def latest_token(self, channel_id: str) -> Optional[str]: ...

    async def user_info(self, user_id: str) -> Optional[Dict[str, Any]]: ...


@runtime_checkable
class TransferPort(Protocol):
    """Interface for moving attachment bytes through local storage."""

    def transfer(self, ref: AttachmentRef) -> AsyncContextManager[TransferredFile]: ...

    def materialize(self, data: bytes, filename: str) -> AsyncContextManager[TransferredFile]: ...

    async def fetch_bytes(self, url: str, auth_header: Optional[str] = None) -> bytes: ...
