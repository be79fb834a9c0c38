"""
Liveness HTTP endpoints for hosting platforms (Render, etc.).
"""

import logging
import time

import discord
from aiohttp import web

from .payloads import iso_timestamp

logger = logging.getLogger("discord_bot")

CLIENT_KEY = web.AppKey("client", discord.Client)
STARTED_AT_KEY = web.AppKey("started_at", float)


async def handle_root(request: web.Request) -> web.Response:
    client = request.app[CLIENT_KEY]
    return web.json_response({
        'status': 'online',
        'bot': str(client.user) if client.user else 'Starting...',
        'uptime': int(time.monotonic() - request.app[STARTED_AT_KEY]),
        'timestamp': iso_timestamp(),
    })


async def handle_health(request: web.Request) -> web.Response:
    client = request.app[CLIENT_KEY]
    return web.json_response({
        'status': 'healthy',
        'botReady': client.is_ready(),
        'timestamp': iso_timestamp(),
    })


def create_app(client: discord.Client, started_at: float = None) -> web.Application:
    app = web.Application()
    app[CLIENT_KEY] = client
    app[STARTED_AT_KEY] = time.monotonic() if started_at is None else started_at
    app.router.add_get('/', handle_root)
    app.router.add_get('/health', handle_health)
    return app


class HealthServer:
    """Runs the health app alongside the bot on the same event loop."""

    def __init__(self, client: discord.Client, port: int, host: str = '0.0.0.0') -> None:
        self.client = client
        self.port = port
        self.host = host
        self._runner = None

    async def start(self) -> bool:
        runner = web.AppRunner(create_app(self.client), access_log=None)
        await runner.setup()
        try:
            await web.TCPSite(runner, self.host, self.port).start()
        except OSError as e:
            logger.error(f"Health check server could not bind to port {self.port}: {e}")
            await runner.cleanup()
            return False
        self._runner = runner
        logger.info(f"🌐 Health check server running on port {self.port}")
        return True

    async def stop(self) -> None:
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
