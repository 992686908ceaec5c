"""Relay loop — polls Slack history for a mirror and relays new messages to Discord."""

import asyncio
import sys
from typing import Any, Callable, Dict, List, Optional

from mirrorbot.domain.cursor import CursorStore, token_key
from mirrorbot.domain.router import MirrorRouter
from mirrorbot.ports.inbound import SLACK, Mirror, NormalizedMessage
from mirrorbot.ports.outbound import ChatSendPort, DeliveryResult, HistoryPort, TransferPort

# (raw message, user info or None) -> NormalizedMessage
Normalizer = Callable[[Dict[str, Any], Optional[Dict[str, Any]]], NormalizedMessage]


def _log(msg: str):
    print(msg, file=sys.stderr)


class RelayLoop:
    """Recurring, stoppable poll task for one mirror (Slack -> Discord).

    The cursor moves past a message before it is delivered. A delivery that
    fails afterwards is logged and not retried on a later poll.
    """

    def __init__(
        self,
        mirror: Mirror,
        router: MirrorRouter,
        history: HistoryPort,
        sender: ChatSendPort,
        transfer: TransferPort,
        normalize: Normalizer,
        interval: float = 1.0,
    ):
        self.mirror = mirror
        self.cursor = CursorStore(history)
        self._router = router
        self._history = history
        self._sender = sender
        self._transfer = transfer
        self._normalize = normalize
        self._interval = interval
        self._stop = asyncio.Event()
        self._task: Optional[asyncio.Task] = None
        self.stats = {"relayed": 0, "failed": 0, "skipped": 0}

    @property
    def tag(self) -> str:
        return f"[relay:{self.mirror.slack_channel_id}]"

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        await self.cursor.initialize(self.mirror)
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        self._stop.set()
        if self._task is not None:
            await self._task
            self._task = None

    async def _run(self):
        _log(f"{self.tag} started, every {self._interval}s from {self.cursor.get(self.mirror)}")
        while not self._stop.is_set():
            try:
                await self.run_once()
            except Exception as e:
                _log(f"{self.tag} poll error: {e}")
            try:
                await asyncio.wait_for(self._stop.wait(), timeout=self._interval)
            except asyncio.TimeoutError:
                pass
        _log(f"{self.tag} stopped at {self.cursor.get(self.mirror)}")

    async def run_once(self) -> List[DeliveryResult]:
        """Fetch everything after the cursor and relay it in token order."""
        oldest = self.cursor.get(self.mirror)
        floor = token_key(oldest)
        raw_messages = await self._history.history(self.mirror.slack_channel_id, oldest)

        batch = []
        for raw in raw_messages:
            msg = self._normalize(raw, None)
            key = token_key(msg.token)
            if key is None or key <= floor:
                continue
            batch.append((key, raw, msg))
        batch.sort(key=lambda item: item[0])

        results = []
        for _, raw, preview in batch:
            result = await self._process(raw, preview)
            if result is not None:
                results.append(result)
        return results

    async def _process(self, raw: Dict[str, Any], preview: NormalizedMessage) -> Optional[DeliveryResult]:
        # Cursor tracks position, not delivery: it moves past everything seen.
        self.cursor.advance(self.mirror, preview.token)

        if preview.has_subtype:
            self.stats["skipped"] += 1
            return None
        if not preview.author_id or preview.is_bot:
            self.stats["skipped"] += 1
            return None

        destination = self._router.resolve(self.mirror.slack_channel_id, SLACK)
        if destination is None:
            _log(f"{self.tag} no destination configured")
            return None

        try:
            user = await self._history.user_info(preview.author_id)
        except Exception as e:
            _log(f"{self.tag} user lookup failed for {preview.author_id}: {e}")
            self.stats["failed"] += 1
            return DeliveryResult(success=False, error=str(e))
        if not user or user.get("is_bot", False):
            self.stats["skipped"] += 1
            return None

        msg = self._normalize(raw, user)
        try:
            result = await self._dispatch(msg, destination)
        except Exception as e:
            result = DeliveryResult(success=False, error=str(e))

        if result is None:
            self.stats["skipped"] += 1
            return None
        if result.success:
            self.stats["relayed"] += 1
            _log(f"{self.tag} relayed {msg.token} -> {destination}")
        else:
            self.stats["failed"] += 1
            _log(f"{self.tag} delivery of {msg.token} failed (not retried): {result.error}")
        return result

    async def _dispatch(self, msg: NormalizedMessage, destination) -> Optional[DeliveryResult]:
        text = msg.display_text if msg.body else None
        if msg.attachments:
            # Only the first attachment is carried over.
            async with self._transfer.transfer(msg.attachments[0]) as file:
                return await self._sender.send_file(destination, file, text=text)
        if text:
            return await self._sender.send_text(destination, text)
        return None
