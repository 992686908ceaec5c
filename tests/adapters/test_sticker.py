"""Tests for sticker re-encoding."""

from io import BytesIO

import pytest
from PIL import Image, UnidentifiedImageError

from mirrorbot.adapters.media.sticker import encode_sticker, reencode_png

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


def _image_bytes(fmt: str, size=(16, 16), color=(255, 0, 0)) -> bytes:
    buf = BytesIO()
    mode = "P" if fmt == "GIF" else "RGB"
    Image.new("RGB", size, color).convert(mode).save(buf, format=fmt)
    return buf.getvalue()


class TestReencode:
    def test_png_stays_png(self):
        out = reencode_png(_image_bytes("PNG"))
        assert out.startswith(PNG_MAGIC)

    def test_gif_becomes_png(self):
        out = reencode_png(_image_bytes("GIF", size=(8, 4)))
        assert out.startswith(PNG_MAGIC)
        with Image.open(BytesIO(out)) as img:
            assert img.size == (8, 4)
            assert img.mode == "RGBA"

    def test_garbage_rejected(self):
        with pytest.raises(UnidentifiedImageError):
            reencode_png(b"not an image")


class TestEncodeSticker:
    @pytest.mark.asyncio
    async def test_async_wrapper(self):
        out = await encode_sticker(_image_bytes("PNG"))
        assert out.startswith(PNG_MAGIC)
