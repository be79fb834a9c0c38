"""Tests for interaction classification."""

from unittest.mock import MagicMock

import discord
import pytest

from utils.events import (
    InteractionKind, classify_interaction, modal_text_value, selected_values,
)


def _interaction(interaction_type, data):
    interaction = MagicMock()
    interaction.type = interaction_type
    interaction.data = data
    return interaction


@pytest.mark.parametrize("interaction_type,data,expected", [
    (discord.InteractionType.application_command, {'name': 'search_ads'}, InteractionKind.SEARCH_COMMAND),
    (discord.InteractionType.application_command, {'name': 'ping'}, InteractionKind.UNKNOWN),
    (discord.InteractionType.modal_submit, {'custom_id': 'searchAdsModal'}, InteractionKind.QUERY_FORM),
    (discord.InteractionType.modal_submit, {'custom_id': 'otherModal'}, InteractionKind.UNKNOWN),
    (discord.InteractionType.component, {'custom_id': 'mediaTypeSelect'}, InteractionKind.MEDIA_TYPE_CHOICE),
    (discord.InteractionType.component, {'custom_id': 'adStatusSelect'}, InteractionKind.AD_STATUS_CHOICE),
    (discord.InteractionType.component, {'custom_id': 'button'}, InteractionKind.UNKNOWN),
    (discord.InteractionType.ping, None, InteractionKind.UNKNOWN),
])
def test_classify_interaction(interaction_type, data, expected):
    assert classify_interaction(_interaction(interaction_type, data)) is expected


def test_modal_text_value_from_action_row():
    interaction = _interaction(discord.InteractionType.modal_submit, {
        'custom_id': 'searchAdsModal',
        'components': [{'type': 1, 'components': [
            {'type': 4, 'custom_id': 'searchQuery', 'value': 'running shoes'},
        ]}],
    })
    assert modal_text_value(interaction, 'searchQuery') == 'running shoes'


def test_modal_text_value_from_label():
    interaction = _interaction(discord.InteractionType.modal_submit, {
        'components': [{'type': 18, 'component': {'type': 4, 'custom_id': 'searchQuery', 'value': 'tea'}}],
    })
    assert modal_text_value(interaction, 'searchQuery') == 'tea'


def test_modal_text_value_missing():
    interaction = _interaction(discord.InteractionType.modal_submit, {'components': []})
    with pytest.raises(KeyError):
        modal_text_value(interaction, 'searchQuery')


def test_selected_values():
    interaction = _interaction(discord.InteractionType.component, {'values': ['VIDEO']})
    assert selected_values(interaction) == ['VIDEO']
    assert selected_values(_interaction(discord.InteractionType.component, {})) == []
