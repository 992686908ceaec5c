"""Tests for port data types and protocol conformance."""

from mirrorbot.adapters.discord.sender import DiscordChannelSender
from mirrorbot.adapters.media.transfer import AttachmentTransfer
from mirrorbot.adapters.slack.client import SlackClient
from mirrorbot.ports import (
    AttachmentRef,
    ChatSendPort,
    DeliveryResult,
    HistoryPort,
    Mirror,
    NormalizedMessage,
    TransferPort,
)


class TestDeliveryResult:
    def test_defaults(self):
        r = DeliveryResult(success=True)
        assert r.message_id is None
        assert r.error is None

    def test_failure(self):
        r = DeliveryResult(success=False, error="rate limited")
        assert r.success is False
        assert r.error == "rate limited"


class TestAttachmentRef:
    def test_extension_from_url_path(self):
        ref = AttachmentRef(url="https://cdn.example.com/a/b/photo.JPG?ex=1&is=2")
        assert ref.extension == ".jpg"

    def test_extension_falls_back_to_filename(self):
        ref = AttachmentRef(url="https://files.example.com/download/F123", filename="notes.txt")
        assert ref.extension == ".txt"

    def test_no_extension(self):
        assert AttachmentRef(url="https://example.com/blob").extension == ""


class TestNormalizedMessage:
    def test_display_text(self):
        msg = NormalizedMessage(author_name="alice", body="hi", token="1", channel_id="C1")
        assert msg.display_text == "alice: hi"

    def test_has_subtype(self):
        assert NormalizedMessage("a", "", "1", "C1", subtype="channel_join").has_subtype is True
        assert NormalizedMessage("a", "", "1", "C1").has_subtype is False


class TestMirror:
    def test_hashable_and_label(self):
        m = Mirror(1, "C1")
        assert {m: 1}[Mirror(1, "C1")] == 1
        assert m.label == "1<->C1"


class TestProtocolConformance:
    def test_slack_client(self):
        client = SlackClient("xoxb-test")
        assert isinstance(client, HistoryPort)
        assert isinstance(client, ChatSendPort)

    def test_discord_sender(self):
        from unittest.mock import MagicMock

        assert isinstance(DiscordChannelSender(MagicMock()), ChatSendPort)

    def test_transfer(self, tmp_path):
        assert isinstance(AttachmentTransfer(str(tmp_path)), TransferPort)
