"""Discord-to-core message mapping adapter.

This keeps discord.py-specific details out of the core pipeline.
"""

from __future__ import annotations

from typing import Any, Optional

import discord

from core.models import Attachment, Embed, EmbedField, RawMessage


def _optional_text(value: Any) -> Optional[str]:
    # discord.py returns None for unset embed parts.
    if value is None:
        return None
    return str(value)


def _build_embed(embed: discord.Embed) -> Embed:
    author = getattr(embed, "author", None)
    footer = getattr(embed, "footer", None)
    fields = tuple(
        EmbedField(name=str(field.name), value=str(field.value))
        for field in getattr(embed, "fields", None) or ()
    )
    return Embed(
        author_name=_optional_text(getattr(author, "name", None)),
        description=_optional_text(getattr(embed, "description", None)),
        fields=fields,
        footer_text=_optional_text(getattr(footer, "text", None)),
        title=_optional_text(getattr(embed, "title", None)),
    )


def _build_attachment(attachment: discord.Attachment) -> Attachment:
    return Attachment(
        content_type=getattr(attachment, "content_type", None),
        filename=getattr(attachment, "filename", None),
    )


def build_raw_message(message: discord.Message) -> RawMessage:
    """Build a core RawMessage from a discord.py Message."""

    # role_mentions only holds roles the guild cache resolved; raw ids are the fallback.
    role_mentions = getattr(message, "role_mentions", None)
    if role_mentions:
        role_ids = tuple(role.id for role in role_mentions)
    else:
        role_ids = tuple(getattr(message, "raw_role_mentions", None) or ())

    return RawMessage(
        id=message.id,
        author_id=message.author.id,
        channel_id=message.channel.id,
        content=message.content or "",
        timestamp=message.created_at,
        pinned=bool(message.pinned),
        embeds=tuple(_build_embed(embed) for embed in message.embeds),
        attachments=tuple(_build_attachment(attachment) for attachment in message.attachments),
        mention_user_ids=tuple(user.id for user in message.mentions),
        mention_role_ids=role_ids,
        sticker_ids=tuple(sticker.id for sticker in getattr(message, "stickers", None) or ()),
    )
