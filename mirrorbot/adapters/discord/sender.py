"""Posting into Discord channels — implements ChatSendPort."""

import asyncio
from typing import List, Optional

import discord

from mirrorbot.ports.inbound import ChannelId
from mirrorbot.ports.outbound import DeliveryResult, TransferredFile

DISCORD_MESSAGE_LIMIT = 2000


class DiscordChannelSender:
    """ChatSendPort implementation using discord.Client."""

    def __init__(self, client: discord.Client, timeout: float = 30.0):
        self._client = client
        self._timeout = timeout

    async def _channel(self, channel_id: ChannelId):
        channel_id = int(channel_id)
        channel = self._client.get_channel(channel_id)
        if channel is None:
            channel = await self._client.fetch_channel(channel_id)
        return channel

    async def _send(self, channel_id: ChannelId, text: Optional[str], file: Optional[TransferredFile]) -> DeliveryResult:
        try:
            channel = await asyncio.wait_for(self._channel(channel_id), timeout=self._timeout)
            chunks = self._split_message(text) if text else [None]
            sent = None
            for i, chunk in enumerate(chunks):
                kwargs = {}
                if chunk:
                    kwargs["content"] = chunk
                if file is not None and i == len(chunks) - 1:
                    kwargs["file"] = discord.File(str(file.path), filename=file.filename)
                sent = await asyncio.wait_for(channel.send(**kwargs), timeout=self._timeout)
            return DeliveryResult(success=True, message_id=str(sent.id) if sent else None)
        except asyncio.TimeoutError:
            return DeliveryResult(success=False, error=f"timed out after {self._timeout}s")
        except Exception as e:
            return DeliveryResult(success=False, error=str(e))

    async def send_text(self, channel_id: ChannelId, text: str) -> DeliveryResult:
        return await self._send(channel_id, text, None)

    async def send_file(
        self,
        channel_id: ChannelId,
        file: TransferredFile,
        text: Optional[str] = None,
    ) -> DeliveryResult:
        return await self._send(channel_id, text, file)

    @staticmethod
    def _split_message(text: str, limit: int = DISCORD_MESSAGE_LIMIT) -> List[str]:
        """Split a message into chunks that fit Discord's character limit"""
        if len(text) <= limit:
            return [text]
        chunks = []
        while text:
            chunks.append(text[:limit])
            text = text[limit:]
        return chunks
