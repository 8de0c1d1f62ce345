from __future__ import annotations

from datetime import datetime, timezone

from core.media import MediaCategory, classify
from core.models import Attachment, Embed, RawMessage


def _message(**overrides) -> RawMessage:
    values = dict(
        id=1,
        author_id=2,
        channel_id=3,
        content="",
        timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    values.update(overrides)
    return RawMessage(**values)


def test_category_order_and_names() -> None:
    assert [category.value for category in MediaCategory] == [
        "link",
        "embed",
        "file",
        "video",
        "image",
        "sound",
        "sticker",
    ]


def test_plain_message_has_no_media() -> None:
    assert classify(_message(content="just text")) == []


def test_link_matches_unanchored_substring() -> None:
    assert MediaCategory.LINK.is_in_message(_message(content="see http://a.b"))
    assert MediaCategory.LINK.is_in_message(_message(content="prefixhttps://"))
    assert MediaCategory.LINK.is_in_message(_message(content="`type https:// first`"))


def test_link_is_case_sensitive() -> None:
    assert not MediaCategory.LINK.is_in_message(_message(content="HTTPS://EXAMPLE.COM"))
    assert not MediaCategory.LINK.is_in_message(_message(content="ftp://example.com"))
    assert not MediaCategory.LINK.is_in_message(_message(content="https:/broken"))


def test_embed_file_sticker_follow_presence() -> None:
    message = _message(
        embeds=(Embed(title="t"),),
        attachments=(Attachment(content_type=None),),
        sticker_ids=(99,),
    )
    assert classify(message) == [MediaCategory.EMBED, MediaCategory.FILE, MediaCategory.STICKER]


def test_mime_prefixes() -> None:
    message = _message(
        attachments=(
            Attachment(content_type="audio/ogg"),
            Attachment(content_type="image/png"),
        )
    )
    assert classify(message) == [MediaCategory.FILE, MediaCategory.IMAGE, MediaCategory.SOUND]


def test_pdf_is_only_a_file() -> None:
    message = _message(attachments=(Attachment(content_type="application/pdf"),))
    assert classify(message) == [MediaCategory.FILE]


def test_attachment_without_content_type_is_only_a_file() -> None:
    message = _message(attachments=(Attachment(filename="blob"),))
    assert MediaCategory.FILE.is_in_message(message)
    assert not MediaCategory.VIDEO.is_in_message(message)
    assert not MediaCategory.IMAGE.is_in_message(message)
    assert not MediaCategory.SOUND.is_in_message(message)
