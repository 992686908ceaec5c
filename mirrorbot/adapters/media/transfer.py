"""Attachment transfer using aiohttp (stream to a local file, then upload)."""

import asyncio
import os
import sys
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

import aiohttp

from mirrorbot.ports.inbound import AttachmentRef
from mirrorbot.ports.outbound import TransferredFile

CHUNK_SIZE = 64 * 1024


def _log(msg: str):
    print(msg, file=sys.stderr)


class TransferError(Exception):
    """Raised when an attachment cannot be fetched or stored."""


class AttachmentTransfer:
    """Moves remote files through uniquely named temp files.

    Every transfer gets its own file name, so concurrent transfers never
    share storage. The file exists only inside the ``async with`` block.
    """

    def __init__(self, tmp_dir: str, timeout: float = 30.0):
        self._tmp_dir = Path(tmp_dir)
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    def _allocate(self, ext: str) -> Path:
        self._tmp_dir.mkdir(parents=True, exist_ok=True)
        return self._tmp_dir / f"relay-{uuid.uuid4().hex}{ext}"

    @staticmethod
    def _headers(auth_header: Optional[str]) -> dict:
        return {"Authorization": auth_header} if auth_header else {}

    @asynccontextmanager
    async def transfer(self, ref: AttachmentRef) -> AsyncIterator[TransferredFile]:
        """Download ``ref`` completely, then yield the local copy."""
        path = self._allocate(ref.extension)
        filename = ref.filename or f"input{ref.extension}"
        try:
            _log(f"[transfer] downloading {ref.url}")
            size = 0
            try:
                async with aiohttp.ClientSession(timeout=self._timeout) as session:
                    async with session.get(ref.url, headers=self._headers(ref.auth_header)) as resp:
                        if resp.status >= 400:
                            raise TransferError(f"GET {ref.url} returned HTTP {resp.status}")
                        f = await asyncio.to_thread(open, path, "wb")
                        try:
                            async for chunk in resp.content.iter_chunked(CHUNK_SIZE):
                                await asyncio.to_thread(f.write, chunk)
                                size += len(chunk)
                        finally:
                            await asyncio.to_thread(f.close)
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                raise TransferError(f"GET {ref.url} failed: {e}") from e
            yield TransferredFile(path=path, filename=filename, size=size)
        finally:
            self._discard(path)

    @asynccontextmanager
    async def materialize(self, data: bytes, filename: str) -> AsyncIterator[TransferredFile]:
        """Write in-memory bytes to per-transfer storage and yield the file."""
        path = self._allocate(os.path.splitext(filename)[1].lower())
        try:
            await asyncio.to_thread(path.write_bytes, data)
            yield TransferredFile(path=path, filename=filename, size=len(data))
        finally:
            self._discard(path)

    async def fetch_bytes(self, url: str, auth_header: Optional[str] = None) -> bytes:
        """Small buffered GET, for resources that are processed in memory."""
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.get(url, headers=self._headers(auth_header)) as resp:
                    if resp.status >= 400:
                        raise TransferError(f"GET {url} returned HTTP {resp.status}")
                    return await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransferError(f"GET {url} failed: {e}") from e

    @staticmethod
    def _discard(path: Path):
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            _log(f"[transfer] could not remove {path}: {e}")
