"""Sticker re-encoding with Pillow."""

import asyncio
from io import BytesIO

from PIL import Image


def reencode_png(data: bytes) -> bytes:
    """Decode any Pillow-readable image and write it back out as PNG.

    Animated inputs keep only their first frame.
    """
    with Image.open(BytesIO(data)) as img:
        img.seek(0)
        frame = img.convert("RGBA")
    out = BytesIO()
    frame.save(out, format="PNG")
    return out.getvalue()


async def encode_sticker(data: bytes) -> bytes:
    return await asyncio.to_thread(reencode_png, data)
