"""Attachment and sticker handling."""

from mirrorbot.adapters.media.sticker import encode_sticker, reencode_png
from mirrorbot.adapters.media.transfer import AttachmentTransfer, TransferError

__all__ = ["AttachmentTransfer", "TransferError", "encode_sticker", "reencode_png"]
