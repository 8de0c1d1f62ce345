"""Media classification for messages (core domain).

Each category has its own predicate. Categories are independent: a message
with one PNG attachment is both a "file" and an "image".
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Callable

from core.models import Attachment, RawMessage

# Unanchored substring match: "https://" inside prose or code blocks counts too.
LINK_RE = re.compile(r"https?://")


def _is_mime_type(attachment: Attachment, mime_type: str) -> bool:
    if attachment.content_type is None:
        return False
    return attachment.content_type.startswith(mime_type)


def _has_mime_type(message: RawMessage, mime_type: str) -> bool:
    return any(_is_mime_type(attachment, mime_type) for attachment in message.attachments)


class MediaCategory(str, Enum):
    """Kinds of media a message can carry, in the order they are written."""

    LINK = "link"
    EMBED = "embed"
    FILE = "file"
    VIDEO = "video"
    IMAGE = "image"
    SOUND = "sound"
    STICKER = "sticker"

    def is_in_message(self, message: RawMessage) -> bool:
        return _PREDICATES[self](message)


_PREDICATES: dict[MediaCategory, Callable[[RawMessage], bool]] = {
    MediaCategory.LINK: lambda message: LINK_RE.search(message.content) is not None,
    MediaCategory.EMBED: lambda message: bool(message.embeds),
    MediaCategory.FILE: lambda message: bool(message.attachments),
    MediaCategory.VIDEO: lambda message: _has_mime_type(message, "video"),
    MediaCategory.IMAGE: lambda message: _has_mime_type(message, "image"),
    MediaCategory.SOUND: lambda message: _has_mime_type(message, "audio"),
    MediaCategory.STICKER: lambda message: bool(message.sticker_ids),
}


def classify(message: RawMessage) -> list[MediaCategory]:
    """Return every category present in the message, in enum order."""

    return [category for category in MediaCategory if category.is_in_message(message)]
