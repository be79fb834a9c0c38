"""
Discord Bot - Channel Forwarder
Forwards every non-bot message posted in one channel to an n8n webhook as JSON.
"""

import platform
import sys
import discord
from discord.ext import commands

from utils import TOKEN, PREFIX, N8N_WEBHOOK, JWT_SECRET, PORT, FORWARD_TIMEOUT
from utils import ConfigError, validate_forwarder_config
from utils import setup_logger, post_json, HealthServer
from utils.payloads import OutgoingMessagePayload

logger = setup_logger()

intents = discord.Intents.default()
intents.message_content = True


class ForwarderBot(commands.Bot):
    """Relays messages from the target channel to the webhook."""

    def __init__(
        self,
        channel_id: int,
        webhook_url: str = N8N_WEBHOOK,
        jwt_secret: str = JWT_SECRET,
        timeout: float = FORWARD_TIMEOUT,
        health_port: int = PORT,
    ) -> None:
        super().__init__(
            command_prefix=PREFIX,
            intents=intents,
            help_command=None,
        )
        self.logger = logger
        self.channel_id = channel_id
        self.webhook_url = webhook_url
        self.jwt_secret = jwt_secret
        self.timeout = timeout
        self.health_port = health_port
        self.health_server = None

    async def setup_hook(self) -> None:
        """Executed when the bot starts."""
        self.logger.info(f"Logged in as {self.user}")
        self.logger.info(f"discord.py API version: {discord.__version__}")
        self.logger.info(f"Python version: {platform.python_version()}")
        self.logger.info(
            f"Running on: {platform.system()} {platform.release()}")
        self.logger.info("-------------------")

        if self.health_port:
            self.health_server = HealthServer(self, self.health_port)
            await self.health_server.start()

        self.logger.info(f"Forwarding messages from channel {self.channel_id}")

    async def close(self) -> None:
        if self.health_server is not None:
            await self.health_server.stop()
        await super().close()

    def should_forward(self, message: discord.Message) -> bool:
        if message.author.bot or message.author == self.user:
            return False
        return message.channel.id == self.channel_id

    async def on_message(self, message: discord.Message) -> None:
        try:
            if not self.should_forward(message):
                return
            await self.forward_message(message)
        except Exception as e:
            self.logger.error(f"Error in on_message: {e}", exc_info=True)

    async def forward_message(self, message: discord.Message):
        payload = OutgoingMessagePayload.from_message(message)
        self.logger.info(
            f"Forwarding message {payload.message_id} from {message.author} "
            f"({len(payload.attachments)} attachment(s))")

        result = await post_json(
            self.webhook_url,
            payload.to_dict(),
            timeout=self.timeout,
            secret=self.jwt_secret,
            subject=payload.author_id,
        )

        if result.ok:
            self.logger.info(f"Message {payload.message_id} forwarded (status: {result.status})")
        else:
            self.logger.error(
                f"Failed to forward message {payload.message_id}: {result.error}")
        return result


def main():
    """Main entry point for the forwarder bot."""
    try:
        channel_id = validate_forwarder_config()
    except ConfigError as e:
        logger.error(str(e))
        sys.exit(1)

    bot = ForwarderBot(channel_id)
    bot.run(TOKEN)


if __name__ == "__main__":
    main()
