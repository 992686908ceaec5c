"""Mirror routing table — static after startup."""

from typing import Iterable, Optional, Tuple

from mirrorbot.ports.inbound import DISCORD, SLACK, ChannelId, Mirror


class MirrorRouter:
    """Maps a source channel on one platform to its mirrored channel."""

    def __init__(self, mirrors: Iterable[Mirror]):
        self._mirrors: Tuple[Mirror, ...] = tuple(mirrors)

    @property
    def mirrors(self) -> Tuple[Mirror, ...]:
        return self._mirrors

    def mirror_for(self, source_channel_id: ChannelId, source_platform: str) -> Optional[Mirror]:
        if source_platform == DISCORD:
            try:
                wanted = int(source_channel_id)
            except (TypeError, ValueError):
                return None
            for mirror in self._mirrors:
                if mirror.discord_channel_id == wanted:
                    return mirror
            return None
        if source_platform == SLACK:
            wanted_str = str(source_channel_id)
            for mirror in self._mirrors:
                if mirror.slack_channel_id == wanted_str:
                    return mirror
            return None
        raise ValueError(f"unknown platform: {source_platform!r}")

    def resolve(self, source_channel_id: ChannelId, source_platform: str) -> Optional[ChannelId]:
        """Return the destination channel id, or None when unmirrored."""
        mirror = self.mirror_for(source_channel_id, source_platform)
        if mirror is None:
            return None
        if source_platform == DISCORD:
            return mirror.slack_channel_id
        return mirror.discord_channel_id
