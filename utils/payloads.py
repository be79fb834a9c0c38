"""
JSON payloads sent to the n8n webhooks.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Tuple

import discord

from .selection_store import PendingSelection


def iso_timestamp(moment: datetime = None) -> str:
    """UTC ISO-8601 with milliseconds and a Z suffix, e.g. 2026-10-17T09:30:00.123Z"""
    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime('%Y-%m-%dT%H:%M:%S.') + f"{moment.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class OutgoingSearchPayload:
    search_query: str
    media_type: str
    ad_status: str
    user_id: str
    username: str
    timestamp: str

    @classmethod
    def from_selection(cls, selection: PendingSelection, user: discord.abc.User,
                       now: datetime = None) -> "OutgoingSearchPayload":
        if not selection.is_complete:
            raise ValueError("Selection needs both a media type and an ad status")
        return cls(
            search_query=selection.search_query,
            media_type=selection.media_type.value,
            ad_status=selection.ad_status.value,
            user_id=str(user.id),
            username=user.name,
            timestamp=iso_timestamp(now),
        )

    def to_dict(self) -> dict:
        return {
            'searchQuery': self.search_query,
            'mediaType': self.media_type,
            'adStatus': self.ad_status,
            'userId': self.user_id,
            'username': self.username,
            'timestamp': self.timestamp,
        }


@dataclass(frozen=True)
class AttachmentInfo:
    id: str
    name: str
    url: str
    content_type: Optional[str]
    size: int

    @classmethod
    def from_attachment(cls, attachment: discord.Attachment) -> "AttachmentInfo":
        return cls(
            id=str(attachment.id),
            name=attachment.filename,
            url=attachment.url,
            content_type=attachment.content_type,
            size=attachment.size,
        )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'url': self.url,
            'contentType': self.content_type,
            'size': self.size,
        }


@dataclass(frozen=True)
class OutgoingMessagePayload:
    message_id: str
    content: str
    author_id: str
    author_username: str
    author_discriminator: str
    author_display_name: str
    channel_id: str
    guild_id: Optional[str]
    attachments: Tuple[AttachmentInfo, ...]
    timestamp: str

    @classmethod
    def from_message(cls, message: discord.Message) -> "OutgoingMessagePayload":
        author = message.author
        return cls(
            message_id=str(message.id),
            content=message.content,
            author_id=str(author.id),
            author_username=author.name,
            author_discriminator=author.discriminator,
            author_display_name=author.display_name,
            channel_id=str(message.channel.id),
            guild_id=str(message.guild.id) if message.guild else None,
            attachments=tuple(AttachmentInfo.from_attachment(a) for a in message.attachments),
            timestamp=iso_timestamp(message.created_at),
        )

    def to_dict(self) -> dict:
        return {
            'messageId': self.message_id,
            'content': self.content,
            'author': {
                'id': self.author_id,
                'username': self.author_username,
                'discriminator': self.author_discriminator,
                'displayName': self.author_display_name,
            },
            'channelId': self.channel_id,
            'guildId': self.guild_id,
            'attachments': [a.to_dict() for a in self.attachments],
            'timestamp': self.timestamp,
        }
