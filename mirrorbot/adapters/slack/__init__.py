"""Slack adapter — the polled side of the mirror."""

from mirrorbot.adapters.slack.client import SlackClient
from mirrorbot.adapters.slack.normalize import display_name, normalize_slack_message

__all__ = ["SlackClient", "display_name", "normalize_slack_message"]
