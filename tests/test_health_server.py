"""Tests for the liveness HTTP endpoints."""

import time
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from aiohttp import test_utils

from utils.health_server import HealthServer, create_app


def _client(ready=False, user=None):
    client = MagicMock()
    client.user = user
    client.is_ready.return_value = ready
    return client


@pytest.mark.asyncio
async def test_root_while_starting():
    app = create_app(_client(), started_at=time.monotonic() - 42)
    async with test_utils.TestClient(test_utils.TestServer(app)) as http:
        resp = await http.get("/")
        assert resp.status == 200
        body = await resp.json()

    assert body['status'] == "online"
    assert body['bot'] == "Starting..."
    assert 42 <= body['uptime'] < 50
    assert body['timestamp'].endswith("Z")


@pytest.mark.asyncio
async def test_root_shows_bot_tag():
    user = MagicMock()
    user.__str__.return_value = "AdSearch#1234"
    app = create_app(_client(ready=True, user=user))
    async with test_utils.TestClient(test_utils.TestServer(app)) as http:
        body = await (await http.get("/")).json()
    assert body['bot'] == "AdSearch#1234"


@pytest.mark.asyncio
@pytest.mark.parametrize("ready", [True, False])
async def test_health_reports_readiness(ready):
    app = create_app(_client(ready=ready))
    async with test_utils.TestClient(test_utils.TestServer(app)) as http:
        resp = await http.get("/health")
        body = await resp.json()
    assert body['status'] == "healthy"
    assert body['botReady'] is ready


@pytest.mark.asyncio
async def test_server_start_and_stop():
    server = HealthServer(_client(), port=0, host="127.0.0.1")
    assert await server.start() is True
    await server.stop()
    await server.stop()


@pytest.mark.asyncio
async def test_bind_failure_is_logged_not_raised():
    server = HealthServer(_client(), port=3000, host="127.0.0.1")

    with patch("utils.health_server.web.TCPSite.start",
               AsyncMock(side_effect=OSError("address already in use"))), \
            patch("utils.health_server.logger.error") as log_error:
        started = await server.start()

    assert started is False
    assert server._runner is None
    log_error.assert_called_once()
    assert "3000" in log_error.call_args[0][0]
    await server.stop()
