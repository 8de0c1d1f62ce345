"""Message-to-document mapping (core domain).

Flattens one RawMessage into one Document in a single pass:
1) Scalar fields (id, author, channel, content, timestamp, pinned)
2) Embed text, one value per present part, per embed
3) User and role mentions
4) Media categories as "has" values

The mapper keeps no state between calls and never mutates the schema, so
event handlers can call it concurrently.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Iterator, Optional

from core.media import classify
from core.models import Embed, RawMessage
from core.schema import Document, MessageSchema

# The index stores dates as signed 64-bit nanoseconds since the epoch.
TIMESTAMP_MIN_SECONDS = -(2**63 // 10**9)
TIMESTAMP_MAX_SECONDS = (2**63 - 1) // 10**9


class MalformedMessageError(ValueError):
    """Raised when a message carries a value the schema cannot represent."""


def to_index_timestamp(value: datetime) -> datetime:
    """Convert a message timestamp to a whole-second UTC datetime.

    Naive values are read as UTC. The sub-second part is dropped, which
    rounds toward the earlier second on both sides of the epoch.
    """

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        try:
            value = value.astimezone(timezone.utc)
        except OverflowError as exc:
            raise MalformedMessageError(f"Timestamp out of range: {value.isoformat()}") from exc
    truncated = value.replace(microsecond=0)

    seconds = int(truncated.timestamp())
    if not TIMESTAMP_MIN_SECONDS <= seconds <= TIMESTAMP_MAX_SECONDS:
        raise MalformedMessageError(f"Timestamp out of range: {value.isoformat()}")
    return truncated


def _embed_texts(embed: Embed) -> Iterator[Optional[str]]:
    yield embed.author_name
    yield embed.description
    for field in embed.fields:
        yield field.name
        yield field.value
    yield embed.footer_text
    yield embed.title


def flatten_embeds(embeds: Iterable[Embed]) -> list[str]:
    """Return the searchable text of all embeds, skipping absent parts."""

    return [text for embed in embeds for text in _embed_texts(embed) if text]


def parse_message(schema: MessageSchema, message: RawMessage) -> Document:
    """Build the search document for one message."""

    fields = schema.fields
    doc = schema.new_document()

    doc.add(fields.id, message.id)
    doc.add(fields.author_id, message.author_id)
    doc.add(fields.channel_id, message.channel_id)
    doc.add(fields.content, message.content)
    doc.add(fields.timestamp, to_index_timestamp(message.timestamp))
    doc.add(fields.pinned, message.pinned)

    for text in flatten_embeds(message.embeds):
        doc.add(fields.embed_content, text)

    for user_id in message.mention_user_ids:
        doc.add(fields.mention_user_id, user_id)

    for role_id in message.mention_role_ids:
        doc.add(fields.mention_role_id, role_id)

    for category in classify(message):
        doc.add(fields.has, category.value)

    return doc
