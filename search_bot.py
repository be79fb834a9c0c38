"""
Discord Bot - Meta Ad Search
/search_ads opens a form, collects two filters from select menus and sends
the combined search to an n8n webhook.
"""

import platform
import discord
from discord.ext import commands

from utils import (
    TOKEN, CLIENT_ID, PREFIX, N8N_WEBHOOK_URL, JWT_SECRET, PORT, SEARCH_TIMEOUT, SESSION_TTL,
    ConfigError, validate_search_config,
)
from utils import setup_logger, post_json, HealthServer
from utils.discord_response_handler import (
    SESSION_EXPIRED_MESSAGE, GENERIC_ERROR_MESSAGE,
    build_search_modal, build_filter_view, build_configuration_embed,
    build_loading_embed, build_success_embed, build_failure_embed,
)
from utils.events import (
    InteractionKind, SEARCH_COMMAND_NAME, SEARCH_QUERY_INPUT_ID,
    classify_interaction, modal_text_value, selected_values,
)
from utils.payloads import OutgoingSearchPayload
from utils.selection_store import SelectionStore, ChoiceField, PendingSelection

logger = setup_logger()


class SearchAdsBot(commands.Bot):
    """Slash command + modal + select menu flow that feeds the n8n ad search."""

    def __init__(
        self,
        webhook_url: str = N8N_WEBHOOK_URL,
        store: SelectionStore = None,
        jwt_secret: str = JWT_SECRET,
        search_timeout: float = SEARCH_TIMEOUT,
        health_port: int = PORT,
    ) -> None:
        super().__init__(
            command_prefix=PREFIX,
            intents=discord.Intents.default(),
            help_command=None,
            application_id=CLIENT_ID,
        )
        self.logger = logger
        self.webhook_url = webhook_url
        self.store = store if store is not None else SelectionStore(ttl=SESSION_TTL)
        self.jwt_secret = jwt_secret
        self.search_timeout = search_timeout
        self.health_port = health_port
        self.health_server = None

        self._handlers = {
            InteractionKind.SEARCH_COMMAND: self.handle_search_command,
            InteractionKind.QUERY_FORM: self.handle_query_form,
            InteractionKind.MEDIA_TYPE_CHOICE: self.handle_media_type_choice,
            InteractionKind.AD_STATUS_CHOICE: self.handle_ad_status_choice,
        }
        self._register_commands()

    def _register_commands(self) -> None:
        """Register slash commands."""

        @self.tree.command(name=SEARCH_COMMAND_NAME, description="Search for Meta/Facebook ads with filters")
        async def search_ads(interaction: discord.Interaction):
            await self.dispatch_interaction(interaction, InteractionKind.SEARCH_COMMAND)

    async def setup_hook(self) -> None:
        """Executed when the bot starts."""
        self.logger.info(f"Logged in as {self.user}")
        self.logger.info(f"discord.py API version: {discord.__version__}")
        self.logger.info(f"Python version: {platform.python_version()}")
        self.logger.info(
            f"Running on: {platform.system()} {platform.release()}")
        self.logger.info("-------------------")

        try:
            self.logger.info("🔄 Started refreshing application (/) commands.")
            synced = await self.tree.sync()
            self.logger.info(f"✅ Synced {len(synced)} application (/) commands.")
        except discord.HTTPException as e:
            self.logger.error(f"❌ Error registering commands: {e}")

        if self.health_port:
            self.health_server = HealthServer(self, self.health_port)
            await self.health_server.start()

        self.logger.info("Bot is ready to take /search_ads requests!")

    async def close(self) -> None:
        if self.health_server is not None:
            await self.health_server.stop()
        await super().close()

    async def on_interaction(self, interaction: discord.Interaction) -> None:
        kind = classify_interaction(interaction)
        # Slash commands reach us through the command tree callback instead
        if kind in (InteractionKind.UNKNOWN, InteractionKind.SEARCH_COMMAND):
            return
        await self.dispatch_interaction(interaction, kind)

    async def dispatch_interaction(self, interaction: discord.Interaction, kind: InteractionKind) -> None:
        """
        Run the handler for ``kind``. Any unexpected error is logged and, if
        the interaction has not been answered yet, reported to the user.
        """
        handler = self._handlers.get(kind)
        if handler is None:
            self.logger.debug(f"No handler for interaction kind: {kind.value}")
            return

        try:
            await handler(interaction)
        except Exception as e:
            self.logger.error(
                f"❌ Error handling interaction {kind.value} from {interaction.user}: {e}", exc_info=True)
            if not interaction.response.is_done():
                try:
                    await interaction.response.send_message(GENERIC_ERROR_MESSAGE, ephemeral=True)
                except discord.HTTPException as send_error:
                    self.logger.warning(f"Could not report error to user: {send_error}")

    async def handle_search_command(self, interaction: discord.Interaction) -> None:
        self.logger.info(f"/{SEARCH_COMMAND_NAME} invoked by {interaction.user} (ID: {interaction.user.id})")
        await interaction.response.send_modal(build_search_modal())

    async def handle_query_form(self, interaction: discord.Interaction) -> None:
        search_query = modal_text_value(interaction, SEARCH_QUERY_INPUT_ID)
        selection = self.store.start(interaction.user.id, search_query)
        self.logger.info(f"Search query from {interaction.user}: {search_query}")

        await interaction.response.send_message(
            embed=build_configuration_embed(selection),
            view=build_filter_view(),
            ephemeral=True,
        )

    async def handle_media_type_choice(self, interaction: discord.Interaction) -> None:
        await self._handle_choice(interaction, ChoiceField.MEDIA_TYPE)

    async def handle_ad_status_choice(self, interaction: discord.Interaction) -> None:
        await self._handle_choice(interaction, ChoiceField.AD_STATUS)

    async def _handle_choice(self, interaction: discord.Interaction, choice: ChoiceField) -> None:
        values = selected_values(interaction)
        if not values:
            raise ValueError(f"No value selected for {choice.value}")

        outcome = self.store.apply_choice(interaction.user.id, choice, values[0])
        if outcome is None:
            self.logger.info(f"No active search session for {interaction.user} (ID: {interaction.user.id})")
            await interaction.response.send_message(SESSION_EXPIRED_MESSAGE, ephemeral=True)
            return

        self.logger.debug(f"{interaction.user} chose {choice.value}={values[0]}")
        try:
            await interaction.response.edit_message(embed=build_configuration_embed(outcome.selection))
        except discord.HTTPException as e:
            if not outcome.completed:
                raise
            # The selection already left the store, it must still be submitted
            self.logger.warning(f"Could not update search configuration message: {e}")
            if not interaction.response.is_done():
                await interaction.response.defer()

        if outcome.completed:
            await self.submit_search(interaction, outcome.selection)

    async def submit_search(self, interaction: discord.Interaction, selection: PendingSelection):
        """Send a completed selection to n8n and report the outcome to the user."""
        await interaction.followup.send(embed=build_loading_embed(), ephemeral=True)

        payload = OutgoingSearchPayload.from_selection(selection, interaction.user)
        self.logger.info(
            f"Submitting search for {payload.username}: {payload.search_query!r} "
            f"(media={payload.media_type}, status={payload.ad_status})")

        result = await post_json(
            self.webhook_url,
            payload.to_dict(),
            timeout=self.search_timeout,
            secret=self.jwt_secret,
            subject=payload.user_id,
        )

        if result.ok:
            self.logger.info("Search submitted successfully")
            embed = build_success_embed(selection, result.data)
        else:
            self.logger.error(f"❌ Error submitting to n8n: {result.error}")
            embed = build_failure_embed(result.error)

        await interaction.followup.send(embed=embed, ephemeral=True)
        return result


def main():
    """Main entry point for the search bot."""
    try:
        validate_search_config()
    except ConfigError as e:
        logger.error(str(e))
        return

    if not N8N_WEBHOOK_URL:
        logger.warning("N8N_WEBHOOK_URL is not set, searches will fail until it is configured")

    bot = SearchAdsBot()
    bot.run(TOKEN)


if __name__ == "__main__":
    main()
