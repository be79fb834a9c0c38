"""
Discord Response Handler Utility
Builds the modal, select menus and embeds used by the ad search flow.
"""

import discord
from datetime import datetime, timezone
from typing import Optional

from .events import (
    SEARCH_MODAL_ID, SEARCH_QUERY_INPUT_ID, MEDIA_TYPE_SELECT_ID, AD_STATUS_SELECT_ID,
)
from .selection_store import PendingSelection

FIELD_VALUE_LIMIT = 1024
DESCRIPTION_LIMIT = 4096

WAITING = "⏳ Waiting for selection..."
MEDIA_TYPE_LABEL = "📊 Media Type"
AD_STATUS_LABEL = "📈 Ad Status"

CONFIG_COLOR = discord.Colour(0x5865F2)
LOADING_COLOR = discord.Colour(0xFFA500)
SUCCESS_COLOR = discord.Colour(0x00FF00)
ERROR_COLOR = discord.Colour(0xFF0000)

SESSION_EXPIRED_MESSAGE = "❌ Session expired. Please run /search_ads again."
GENERIC_ERROR_MESSAGE = "❌ An error occurred while processing your request."


def truncate(text: str, limit: int) -> str:
    """Clip text to a Discord length limit, marking the cut with an ellipsis."""
    text = str(text)
    if len(text) <= limit:
        return text
    return text[:limit - 1] + "…"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def build_search_modal() -> discord.ui.Modal:
    modal = discord.ui.Modal(title="🔍 Search Meta Ads", custom_id=SEARCH_MODAL_ID, timeout=15 * 60)
    modal.add_item(discord.ui.TextInput(
        custom_id=SEARCH_QUERY_INPUT_ID,
        label="What ads are you looking for?",
        style=discord.TextStyle.short,
        placeholder="e.g., fitness products, food delivery, etc.",
        required=True,
        min_length=2,
        max_length=100,
    ))
    return modal


def build_filter_view() -> discord.ui.View:
    """
    Two select menus, one per filter. Choices are routed by custom id
    through the bot's interaction dispatcher, not through item callbacks.
    """
    view = discord.ui.View(timeout=None)
    view.add_item(discord.ui.Select(
        custom_id=MEDIA_TYPE_SELECT_ID,
        placeholder="Select Media Type",
        row=0,
        options=[
            discord.SelectOption(label="All Media Types", value="ALL",
                                 description="Include all ad formats", emoji="📱"),
            discord.SelectOption(label="Image Ads", value="IMAGE",
                                 description="Only image-based ads", emoji="🖼️"),
            discord.SelectOption(label="Video Ads", value="VIDEO",
                                 description="Only video-based ads", emoji="🎥"),
        ],
    ))
    view.add_item(discord.ui.Select(
        custom_id=AD_STATUS_SELECT_ID,
        placeholder="Select Ad Status",
        row=1,
        options=[
            discord.SelectOption(label="All Statuses", value="ALL",
                                 description="Show both active and inactive ads", emoji="🔄"),
            discord.SelectOption(label="Active Only", value="ACTIVE",
                                 description="Only currently running ads", emoji="✅"),
            discord.SelectOption(label="Inactive Only", value="INACTIVE",
                                 description="Ads that are no longer running", emoji="⏸️"),
        ],
    ))
    return view


def _choice_display(value) -> str:
    return f"✅ {value.value}" if value is not None else WAITING


def build_configuration_embed(selection: PendingSelection) -> discord.Embed:
    embed = discord.Embed(
        title="🔍 Ad Search Configuration",
        description=truncate(
            f"**Search Query:** {selection.search_query}\n\nPlease select your filters below:",
            DESCRIPTION_LIMIT),
        colour=CONFIG_COLOR,
        timestamp=_now(),
    )
    embed.add_field(name=MEDIA_TYPE_LABEL, value=_choice_display(selection.media_type), inline=True)
    embed.add_field(name=AD_STATUS_LABEL, value=_choice_display(selection.ad_status), inline=True)
    embed.set_footer(text="Select both options to submit your search")
    return embed


def build_loading_embed() -> discord.Embed:
    return discord.Embed(
        title="🔄 Processing Your Request...",
        description="Searching Meta Ad Library...",
        colour=LOADING_COLOR,
        timestamp=_now(),
    )


def build_success_embed(selection: PendingSelection, data: Optional[dict] = None) -> discord.Embed:
    """
    Search completion embed. ``count`` and ``message`` from the webhook's
    JSON body are surfaced when present.
    """
    embed = discord.Embed(
        title="✅ Search Complete!",
        description="Found ads matching your criteria",
        colour=SUCCESS_COLOR,
        timestamp=_now(),
    )
    embed.add_field(name="🔍 Search Query",
                    value=truncate(selection.search_query, FIELD_VALUE_LIMIT), inline=False)
    embed.add_field(name=MEDIA_TYPE_LABEL, value=selection.media_type.value, inline=True)
    embed.add_field(name=AD_STATUS_LABEL, value=selection.ad_status.value, inline=True)
    embed.set_footer(text="Results are being processed by n8n")

    if isinstance(data, dict):
        if data.get('count') is not None:
            embed.add_field(name="📈 Results Found", value=f"{data['count']} ads", inline=True)
        if data.get('message'):
            embed.description = truncate(data['message'], DESCRIPTION_LIMIT)

    return embed


def build_failure_embed(error: Optional[str]) -> discord.Embed:
    embed = discord.Embed(
        title="❌ Search Failed",
        description="Failed to process your request. Please try again.",
        colour=ERROR_COLOR,
        timestamp=_now(),
    )
    embed.add_field(name="Error Details",
                    value=truncate(error or "Unknown error", FIELD_VALUE_LIMIT), inline=False)
    return embed
