"""Keep-alive HTTP server (FastAPI + uvicorn)."""

import asyncio
import sys
from typing import List, Optional, Sequence

import uvicorn
from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from mirrorbot.config import __version__
from mirrorbot.domain.listener import EventListener
from mirrorbot.domain.relay import RelayLoop


def _log(msg: str):
    print(msg, file=sys.stderr)


health_router = APIRouter(tags=["health"])


class MirrorStatus(BaseModel):
    mirror: str
    running: bool
    cursor: str
    relayed: int
    failed: int
    skipped: int


class HealthResponse(BaseModel):
    status: str
    version: str
    mirrors: List[MirrorStatus]
    discord_relayed: int
    discord_failed: int


@health_router.get("/", response_class=PlainTextResponse)
async def root():
    return "mirror bot is alive"


@health_router.get("/health", response_model=HealthResponse)
async def health(request: Request):
    relays: Sequence[RelayLoop] = request.app.state.relays
    listener: Optional[EventListener] = request.app.state.listener
    mirrors = [
        MirrorStatus(
            mirror=loop.mirror.label,
            running=loop.running,
            cursor=loop.cursor.get(loop.mirror),
            **loop.stats,
        )
        for loop in relays
    ]
    ok = bool(mirrors) and all(m.running for m in mirrors)
    return HealthResponse(
        status="ok" if ok else "degraded",
        version=__version__,
        mirrors=mirrors,
        discord_relayed=listener.stats["relayed"] if listener else 0,
        discord_failed=listener.stats["failed"] if listener else 0,
    )


def create_app(relays: Sequence[RelayLoop] = (), listener: Optional[EventListener] = None) -> FastAPI:
    app = FastAPI(title="Mirror Bot")
    app.state.relays = list(relays)
    app.state.listener = listener
    app.include_router(health_router)
    return app


def start_keep_alive(app: FastAPI, port: int) -> asyncio.Task:
    """Serve ``app`` on the running event loop as a background task."""
    config = uvicorn.Config(app, host="0.0.0.0", port=port, log_level="warning")
    server = uvicorn.Server(config)
    _log(f"[web] keep-alive server on :{port}")
    return asyncio.create_task(_serve(server))


async def _serve(server: uvicorn.Server):
    # uvicorn calls sys.exit() when it cannot bind; only the web server may stop.
    try:
        await server.serve()
    except (SystemExit, OSError) as e:
        _log(f"[web] keep-alive disabled: {e!r}")
