"""
Classification of incoming Discord interactions.
"""

from enum import Enum

import discord

SEARCH_COMMAND_NAME = "search_ads"
SEARCH_MODAL_ID = "searchAdsModal"
SEARCH_QUERY_INPUT_ID = "searchQuery"
MEDIA_TYPE_SELECT_ID = "mediaTypeSelect"
AD_STATUS_SELECT_ID = "adStatusSelect"


class InteractionKind(Enum):
    SEARCH_COMMAND = "search_command"
    QUERY_FORM = "query_form"
    MEDIA_TYPE_CHOICE = "media_type_choice"
    AD_STATUS_CHOICE = "ad_status_choice"
    UNKNOWN = "unknown"


_COMPONENTS = {
    MEDIA_TYPE_SELECT_ID: InteractionKind.MEDIA_TYPE_CHOICE,
    AD_STATUS_SELECT_ID: InteractionKind.AD_STATUS_CHOICE,
}


def classify_interaction(interaction: discord.Interaction) -> InteractionKind:
    data = interaction.data or {}

    if interaction.type == discord.InteractionType.application_command:
        if data.get('name') == SEARCH_COMMAND_NAME:
            return InteractionKind.SEARCH_COMMAND
        return InteractionKind.UNKNOWN

    if interaction.type == discord.InteractionType.modal_submit:
        if data.get('custom_id') == SEARCH_MODAL_ID:
            return InteractionKind.QUERY_FORM
        return InteractionKind.UNKNOWN

    if interaction.type == discord.InteractionType.component:
        return _COMPONENTS.get(data.get('custom_id'), InteractionKind.UNKNOWN)

    return InteractionKind.UNKNOWN


def modal_text_value(interaction: discord.Interaction, custom_id: str) -> str:
    """Read a text input's submitted value from a raw modal payload."""
    for row in (interaction.data or {}).get('components', []):
        # action rows nest a list, label wrappers nest a single component
        children = row.get('components') or [row.get('component') or {}]
        for component in children:
            if component.get('custom_id') == custom_id:
                return component.get('value', '')
    raise KeyError(custom_id)


def selected_values(interaction: discord.Interaction) -> list:
    return list((interaction.data or {}).get('values', []))
