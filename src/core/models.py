"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to discord.py types. Sequences are tuples so a message can be shared
between concurrent mapping calls without copying.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class EmbedField:
    """One name/value pair inside an embed."""

    name: str
    value: str


@dataclass(frozen=True)
class Embed:
    """Rich embed attached to a message. Every text part is optional."""

    author_name: Optional[str] = None
    description: Optional[str] = None
    fields: tuple[EmbedField, ...] = ()
    footer_text: Optional[str] = None
    title: Optional[str] = None


@dataclass(frozen=True)
class Attachment:
    """Uploaded file. Only the MIME type matters for classification."""

    content_type: Optional[str] = None
    filename: Optional[str] = None


@dataclass(frozen=True)
class RawMessage:
    """Platform-neutral message as handed to the document mapper."""

    id: int
    author_id: int
    channel_id: int
    content: str
    timestamp: datetime
    pinned: bool = False
    embeds: tuple[Embed, ...] = ()
    attachments: tuple[Attachment, ...] = ()
    mention_user_ids: tuple[int, ...] = ()
    mention_role_ids: tuple[int, ...] = ()
    sticker_ids: tuple[int, ...] = ()
