"""Inbound port — platform-agnostic message representation."""

import posixpath
from dataclasses import dataclass, field
from typing import List, Optional, Union
from urllib.parse import urlparse

DISCORD = "discord"
SLACK = "slack"

ChannelId = Union[int, str]


@dataclass(frozen=True)
class Mirror:
    """A Discord channel paired with a Slack channel."""

    discord_channel_id: int
    slack_channel_id: str

    @property
    def label(self) -> str:
        return f"{self.discord_channel_id}<->{self.slack_channel_id}"


@dataclass
class AttachmentRef:
    """A remote file to be pulled through the transfer adapter."""

    url: str
    filename: str = ""
    auth_header: Optional[str] = None

    @property
    def extension(self) -> str:
        ext = posixpath.splitext(urlparse(self.url).path)[1]
        if not ext and self.filename:
            ext = posixpath.splitext(self.filename)[1]
        return ext.lower()


@dataclass
class NormalizedMessage:
    """Discord/Slack-agnostic message representation."""

    author_name: str
    body: str
    token: str
    channel_id: ChannelId
    is_bot: bool = False
    author_id: Optional[str] = None
    subtype: Optional[str] = None
    attachments: List[AttachmentRef] = field(default_factory=list)
    stickers: List[AttachmentRef] = field(default_factory=list)

    @property
    def has_subtype(self) -> bool:
        return bool(self.subtype)

    @property
    def display_text(self) -> str:
        return f"{self.author_name}: {self.body}"
