"""Slack client using slack_sdk's AsyncWebClient."""

import math
import sys
import time
from collections import OrderedDict
from typing import Any, Dict, List, Optional, Tuple

from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from mirrorbot.ports.inbound import ChannelId
from mirrorbot.ports.outbound import DeliveryResult, TransferredFile

HISTORY_PAGE_SIZE = 200


def _log(msg: str):
    print(msg, file=sys.stderr)


class SlackClient:
    """History polling, user lookup and posting for the Slack side."""

    _MAX_USERS = 500

    def __init__(
        self,
        token: str,
        timeout: float = 30.0,
        web_client: Optional[AsyncWebClient] = None,
        user_ttl: float = 300.0,
    ):
        self._token = token
        # slack_sdk takes whole seconds
        self._web = web_client or AsyncWebClient(token=token, timeout=max(1, math.ceil(timeout)))
        self._user_ttl = user_ttl
        self._users: OrderedDict[str, Tuple[float, Dict[str, Any]]] = OrderedDict()

    @property
    def auth_header(self) -> str:
        """Header value for downloading url_private files."""
        return f"Bearer {self._token}"

    # -- History / directory --

    async def history(self, channel_id: str, oldest: str) -> List[Dict[str, Any]]:
        """All messages newer than ``oldest`` (unordered, every page)."""
        messages: List[Dict[str, Any]] = []
        cursor = None
        while True:
            kwargs = {"channel": channel_id, "oldest": oldest, "limit": HISTORY_PAGE_SIZE}
            if cursor:
                kwargs["cursor"] = cursor
            resp = await self._web.conversations_history(**kwargs)
            messages.extend(resp.get("messages") or [])
            cursor = (resp.get("response_metadata") or {}).get("next_cursor")
            if not resp.get("has_more") or not cursor:
                return messages

    async def latest_token(self, channel_id: str) -> Optional[str]:
        resp = await self._web.conversations_history(channel=channel_id, limit=1)
        messages = resp.get("messages") or []
        if not messages:
            return None
        return messages[0].get("ts")

    async def user_info(self, user_id: str) -> Optional[Dict[str, Any]]:
        """users.info, cached for ``user_ttl`` seconds (LRU-bounded)."""
        cached = self._users.get(user_id)
        if cached and time.monotonic() - cached[0] < self._user_ttl:
            self._users.move_to_end(user_id)
            return cached[1]
        resp = await self._web.users_info(user=user_id)
        user = resp.get("user")
        if user:
            self._users[user_id] = (time.monotonic(), user)
            self._users.move_to_end(user_id)
            while len(self._users) > self._MAX_USERS:
                self._users.popitem(last=False)
        return user

    # -- Sending --

    async def send_text(self, channel_id: ChannelId, text: str) -> DeliveryResult:
        try:
            resp = await self._web.chat_postMessage(channel=str(channel_id), text=text)
            return DeliveryResult(success=True, message_id=resp.get("ts"))
        except SlackApiError as e:
            return DeliveryResult(success=False, error=f"chat.postMessage: {e.response.get('error', e)}")
        except Exception as e:
            return DeliveryResult(success=False, error=f"chat.postMessage: {e}")

    async def send_file(
        self,
        channel_id: ChannelId,
        file: TransferredFile,
        text: Optional[str] = None,
    ) -> DeliveryResult:
        kwargs = {"channel": str(channel_id), "file": str(file.path), "filename": file.filename}
        if text:
            kwargs["initial_comment"] = text
        try:
            resp = await self._web.files_upload_v2(**kwargs)
            uploaded = resp.get("file") or {}
            return DeliveryResult(success=True, message_id=uploaded.get("id"))
        except SlackApiError as e:
            return DeliveryResult(success=False, error=f"files.upload: {e.response.get('error', e)}")
        except Exception as e:
            return DeliveryResult(success=False, error=f"files.upload: {e}")
