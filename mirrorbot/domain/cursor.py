"""Relay cursor — last Slack position already relayed for a mirror.

Slack orders messages by their ``ts`` string ("1700000000.000100"). Tokens are
compared as Decimals so microsecond suffixes never lose precision.
"""

import sys
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Dict, Optional

from mirrorbot.ports.inbound import Mirror
from mirrorbot.ports.outbound import HistoryPort

SENTINEL = "0"


def _log(msg: str):
    print(msg, file=sys.stderr)


def token_key(token: Optional[str]) -> Optional[Decimal]:
    """Sort key for an ordering token; None if it is not numeric."""
    if token is None:
        return None
    try:
        value = Decimal(str(token))
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


@dataclass
class RelayState:
    last_seen: str = SENTINEL

    def advance(self, token: str) -> bool:
        new = token_key(token)
        if new is None or new <= token_key(self.last_seen):
            return False
        self.last_seen = token
        return True


class CursorStore:
    """Owns the RelayState of the mirrors driven by a single relay loop."""

    def __init__(self, history: HistoryPort):
        self._history = history
        self._states: Dict[Mirror, RelayState] = {}

    def state(self, mirror: Mirror) -> RelayState:
        if mirror not in self._states:
            self._states[mirror] = RelayState()
        return self._states[mirror]

    def get(self, mirror: Mirror) -> str:
        return self.state(mirror).last_seen

    async def initialize(self, mirror: Mirror) -> str:
        """Seed the cursor from the newest message in the Slack channel."""
        state = self.state(mirror)
        try:
            latest = await self._history.latest_token(mirror.slack_channel_id)
        except Exception as e:
            _log(f"[cursor:{mirror.slack_channel_id}] initialize failed, starting from {SENTINEL}: {e}")
            return state.last_seen
        if latest:
            state.advance(latest)
        _log(f"[cursor:{mirror.slack_channel_id}] seeded at {state.last_seen}")
        return state.last_seen

    def advance(self, mirror: Mirror, token: str) -> bool:
        """Move the cursor forward; stale, duplicate or malformed tokens are ignored."""
        return self.state(mirror).advance(token)
