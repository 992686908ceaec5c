"""Unit tests for the keep-alive web routes."""

import asyncio
import socket
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

from mirrorbot.adapters.web.server import create_app, start_keep_alive
from mirrorbot.ports.inbound import Mirror


def _relay(mirror, running=True, cursor="1700000000.000100", relayed=3, failed=1, skipped=2):
    return SimpleNamespace(
        mirror=mirror,
        running=running,
        cursor=SimpleNamespace(get=lambda m: cursor),
        stats={"relayed": relayed, "failed": failed, "skipped": skipped},
    )


def _listener(relayed=5, failed=0):
    return SimpleNamespace(stats={"relayed": relayed, "failed": failed})


class TestRoutes:
    @pytest.mark.asyncio
    async def test_root(self):
        app = create_app()
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            resp = await ac.get("/")
        assert resp.status_code == 200
        assert "alive" in resp.text

    @pytest.mark.asyncio
    async def test_health_ok(self):
        app = create_app([_relay(Mirror(1, "C1"))], _listener())
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            resp = await ac.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["mirrors"] == [{
            "mirror": "1<->C1",
            "running": True,
            "cursor": "1700000000.000100",
            "relayed": 3,
            "failed": 1,
            "skipped": 2,
        }]
        assert data["discord_relayed"] == 5
        assert data["discord_failed"] == 0

    @pytest.mark.asyncio
    async def test_health_degraded_when_loop_stopped(self):
        app = create_app([_relay(Mirror(1, "C1")), _relay(Mirror(2, "C2"), running=False)], _listener())
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            resp = await ac.get("/health")
        assert resp.json()["status"] == "degraded"

    @pytest.mark.asyncio
    async def test_health_without_relays(self):
        app = create_app()
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            resp = await ac.get("/health")
        data = resp.json()
        assert data["status"] == "degraded"
        assert data["mirrors"] == []
        assert data["discord_relayed"] == 0


class TestStartKeepAlive:
    @pytest.mark.asyncio
    async def test_server_exit_is_contained(self):
        server = MagicMock()
        server.serve = AsyncMock(side_effect=SystemExit(3))
        with patch("mirrorbot.adapters.web.server.uvicorn.Server", return_value=server):
            task = start_keep_alive(create_app(), 3000)
            await task

        assert task.exception() is None

    @pytest.mark.asyncio
    async def test_port_in_use_does_not_raise(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as taken:
            taken.bind(("0.0.0.0", 0))
            taken.listen(1)
            port = taken.getsockname()[1]

            task = start_keep_alive(create_app(), port)
            await asyncio.wait_for(task, timeout=10)

        assert task.exception() is None
