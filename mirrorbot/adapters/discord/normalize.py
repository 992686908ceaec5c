"""discord.Message -> NormalizedMessage."""

import discord

from mirrorbot.ports.inbound import AttachmentRef, NormalizedMessage

# Lottie stickers are vector JSON and cannot be rasterized.
_RASTER_STICKERS = {
    discord.StickerFormatType.png: "png",
    discord.StickerFormatType.apng: "png",
    discord.StickerFormatType.gif: "gif",
}


def normalize_discord_message(message: discord.Message) -> NormalizedMessage:
    attachments = [AttachmentRef(url=a.url, filename=a.filename) for a in message.attachments]
    stickers = [
        AttachmentRef(url=s.url, filename=f"sticker.{_RASTER_STICKERS[s.format]}")
        for s in message.stickers
        if s.format in _RASTER_STICKERS
    ]
    return NormalizedMessage(
        author_name=message.author.name,
        body=message.content or "",
        token=str(message.id),
        channel_id=message.channel.id,
        is_bot=message.author.bot,
        author_id=str(message.author.id),
        attachments=attachments,
        stickers=stickers,
    )
