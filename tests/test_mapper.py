from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from core.mapper import (
    TIMESTAMP_MAX_SECONDS,
    MalformedMessageError,
    flatten_embeds,
    parse_message,
    to_index_timestamp,
)
from core.models import Attachment, Embed, EmbedField, RawMessage
from core.schema import MessageSchema

SCHEMA = MessageSchema.build()
FIELDS = SCHEMA.fields


def _message(**overrides) -> RawMessage:
    values = dict(
        id=1001,
        author_id=2002,
        channel_id=3003,
        content="",
        timestamp=datetime(2024, 1, 1, 12, 30, 15, tzinfo=timezone.utc),
    )
    values.update(overrides)
    return RawMessage(**values)


def test_link_only_message() -> None:
    message = _message(content="check this out https://example.com", pinned=False)
    doc = parse_message(SCHEMA, message)

    assert doc.get_all(FIELDS.has) == ["link"]
    assert doc.get_first(FIELDS.content) == "check this out https://example.com"
    assert doc.get_all(FIELDS.embed_content) == []
    assert doc.get_all(FIELDS.mention_user_id) == []
    assert doc.get_all(FIELDS.mention_role_id) == []


def test_scalar_fields() -> None:
    doc = parse_message(SCHEMA, _message(pinned=True))

    assert doc.get_first(FIELDS.id) == 1001
    assert doc.get_first(FIELDS.author_id) == 2002
    assert doc.get_first(FIELDS.channel_id) == 3003
    assert doc.get_first(FIELDS.pinned) is True
    assert doc.get_first(FIELDS.timestamp) == datetime(2024, 1, 1, 12, 30, 15, tzinfo=timezone.utc)


def test_empty_content_is_kept() -> None:
    doc = parse_message(SCHEMA, _message(content=""))
    assert doc.get_all(FIELDS.content) == [""]


def test_image_and_video_attachments() -> None:
    message = _message(
        attachments=(
            Attachment(content_type="image/png"),
            Attachment(content_type="video/mp4"),
        )
    )
    doc = parse_message(SCHEMA, message)
    assert set(doc.get_all(FIELDS.has)) == {"file", "image", "video"}


def test_embed_with_title_and_one_field() -> None:
    embed = Embed(title="Title", fields=(EmbedField(name="Name", value="Value"),))
    doc = parse_message(SCHEMA, _message(embeds=(embed,)))

    assert sorted(doc.get_all(FIELDS.embed_content)) == ["Name", "Title", "Value"]
    assert doc.get_all(FIELDS.has) == ["embed"]


def test_embed_text_order_across_embeds() -> None:
    first = Embed(
        author_name="author",
        description="description",
        fields=(EmbedField("n1", "v1"), EmbedField("n2", "v2")),
        footer_text="footer",
        title="title",
    )
    second = Embed(description="second")
    assert flatten_embeds([first, second]) == [
        "author",
        "description",
        "n1",
        "v1",
        "n2",
        "v2",
        "footer",
        "title",
        "second",
    ]


def test_embed_skips_absent_and_empty_parts() -> None:
    assert flatten_embeds([Embed(), Embed(description="", title=None)]) == []


def test_mentions_do_not_cross_over() -> None:
    message = _message(mention_user_ids=(11, 12), mention_role_ids=(21,))
    doc = parse_message(SCHEMA, message)

    assert doc.get_all(FIELDS.mention_user_id) == [11, 12]
    assert doc.get_all(FIELDS.mention_role_id) == [21]


def test_all_categories_in_enum_order() -> None:
    message = _message(
        content="http://x",
        embeds=(Embed(title="t"),),
        attachments=(
            Attachment(content_type="audio/ogg"),
            Attachment(content_type="image/gif"),
            Attachment(content_type="video/webm"),
        ),
        sticker_ids=(5,),
    )
    doc = parse_message(SCHEMA, message)
    assert doc.get_all(FIELDS.has) == ["link", "embed", "file", "video", "image", "sound", "sticker"]


def test_mapping_is_pure() -> None:
    message = _message(
        content="hi https://a",
        embeds=(Embed(title="t", fields=(EmbedField("a", "b"),)),),
        mention_user_ids=(1,),
    )
    assert parse_message(SCHEMA, message) == parse_message(SCHEMA, message)


def test_timestamp_truncated_to_seconds() -> None:
    value = datetime(2024, 5, 1, 8, 0, 0, 999999, tzinfo=timezone.utc)
    assert to_index_timestamp(value) == datetime(2024, 5, 1, 8, 0, 0, tzinfo=timezone.utc)


def test_timestamp_before_epoch_truncates_toward_earlier_second() -> None:
    value = datetime(1969, 12, 31, 23, 59, 59, 500000, tzinfo=timezone.utc)
    result = to_index_timestamp(value)
    assert result == datetime(1969, 12, 31, 23, 59, 59, tzinfo=timezone.utc)
    assert result.timestamp() == -1


def test_timestamp_naive_is_utc_and_offsets_are_normalized() -> None:
    naive = datetime(2024, 1, 1, 0, 0, 0)
    assert to_index_timestamp(naive) == datetime(2024, 1, 1, tzinfo=timezone.utc)

    plus_two = timezone(timedelta(hours=2))
    result = to_index_timestamp(datetime(2024, 1, 1, 2, 0, 0, tzinfo=plus_two))
    assert result.tzinfo == timezone.utc
    assert result.hour == 0


def test_timestamp_out_of_range_is_rejected() -> None:
    too_late = datetime(2300, 1, 1, tzinfo=timezone.utc)
    too_early = datetime(1600, 1, 1, tzinfo=timezone.utc)
    assert too_late.timestamp() > TIMESTAMP_MAX_SECONDS

    with pytest.raises(MalformedMessageError):
        to_index_timestamp(too_late)
    with pytest.raises(MalformedMessageError):
        parse_message(SCHEMA, _message(timestamp=too_early))
