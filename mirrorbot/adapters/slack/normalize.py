"""Slack message dict -> NormalizedMessage."""

from typing import Any, Dict, Optional

from mirrorbot.ports.inbound import AttachmentRef, NormalizedMessage


def display_name(user: Optional[Dict[str, Any]]) -> str:
    if not user:
        return "unknown"
    profile = user.get("profile") or {}
    return (
        user.get("real_name")
        or profile.get("real_name")
        or profile.get("display_name")
        or user.get("name")
        or user.get("id", "unknown")
    )


def normalize_slack_message(
    message: Dict[str, Any],
    user: Optional[Dict[str, Any]] = None,
    auth_header: Optional[str] = None,
) -> NormalizedMessage:
    """Convert a conversations.history entry.

    Without ``user`` the result still carries ordering and filter fields
    (token, subtype, author id, bot flag), which is all the relay needs
    before it decides to look the author up.
    """
    attachments = []
    for f in message.get("files") or []:
        url = f.get("url_private_download") or f.get("url_private")
        if url:
            attachments.append(AttachmentRef(url=url, filename=f.get("name", ""), auth_header=auth_header))

    is_bot = bool(message.get("bot_id")) or bool(user and user.get("is_bot"))
    return NormalizedMessage(
        author_name=display_name(user) if user else (message.get("user") or ""),
        body=message.get("text") or "",
        token=str(message.get("ts") or ""),
        channel_id=message.get("channel", ""),
        is_bot=is_bot,
        author_id=message.get("user"),
        subtype=message.get("subtype"),
        attachments=attachments,
    )
