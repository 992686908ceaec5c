"""Event listener — relays Discord messages into the mirrored Slack channel."""

import asyncio
import sys
from typing import Awaitable, Callable, Optional

from mirrorbot.domain.router import MirrorRouter
from mirrorbot.ports.inbound import DISCORD, NormalizedMessage
from mirrorbot.ports.outbound import ChatSendPort, DeliveryResult, TransferPort

STICKER_FILENAME = "sticker.png"

# raw image bytes -> PNG bytes
StickerEncoder = Callable[[bytes], Awaitable[bytes]]


def _log(msg: str):
    print(msg, file=sys.stderr)


class EventListener:
    """Handles one pushed message at a time; safe to run concurrently."""

    def __init__(
        self,
        router: MirrorRouter,
        sender: ChatSendPort,
        transfer: TransferPort,
        encode_sticker: StickerEncoder,
    ):
        self._router = router
        self._sender = sender
        self._transfer = transfer
        self._encode_sticker = encode_sticker
        self.stats = {"relayed": 0, "failed": 0}

    async def handle(self, msg: NormalizedMessage) -> Optional[DeliveryResult]:
        """Relay one message. Returns None when nothing was sent."""
        if msg.is_bot:
            return None
        destination = self._router.resolve(msg.channel_id, DISCORD)
        if destination is None:
            return None

        try:
            if msg.attachments:
                result = await self._relay_attachment(msg, destination)
            else:
                result = await self._relay_plain(msg, destination)
        except Exception as e:
            result = DeliveryResult(success=False, error=str(e))

        if result is None:
            return None
        if result.success:
            self.stats["relayed"] += 1
            _log(f"[listener] message {msg.token} posted to {destination}")
        else:
            self.stats["failed"] += 1
            _log(f"[listener] error posting message {msg.token} to {destination}: {result.error}")
        return result

    async def _relay_plain(self, msg: NormalizedMessage, destination) -> Optional[DeliveryResult]:
        results = []
        if msg.body:
            results.append(await self._sender.send_text(destination, msg.display_text))

        if len(msg.stickers) == 1:
            sticker = msg.stickers[0]
            raw = await self._transfer.fetch_bytes(sticker.url, sticker.auth_header)
            png = await self._encode_sticker(raw)
            async with self._transfer.materialize(png, STICKER_FILENAME) as file:
                results.append(await self._sender.send_file(destination, file))

        return _combine(results)

    async def _relay_attachment(self, msg: NormalizedMessage, destination) -> DeliveryResult:
        # The upload needs the whole file on disk before it starts.
        async with self._transfer.transfer(msg.attachments[0]) as file:
            # Author text is sent even when the body is empty.
            # No rollback: one send may land while the other fails.
            outcomes = await asyncio.gather(
                self._sender.send_file(destination, file),
                self._sender.send_text(destination, msg.display_text),
                return_exceptions=True,
            )

        results = []
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                _log(f"[listener] partial delivery for {msg.token}: {outcome}")
                results.append(DeliveryResult(success=False, error=str(outcome)))
            else:
                if not outcome.success:
                    _log(f"[listener] partial delivery for {msg.token}: {outcome.error}")
                results.append(outcome)
        return _combine(results)


def _combine(results) -> Optional[DeliveryResult]:
    if not results:
        return None
    failures = [r.error or "unknown error" for r in results if not r.success]
    if failures:
        return DeliveryResult(success=False, error="; ".join(failures))
    return DeliveryResult(success=True, message_id=results[-1].message_id)
