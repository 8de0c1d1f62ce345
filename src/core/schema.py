"""Search document schema for indexed messages.

The schema is built once at startup and handed to the search engine to open
or create the index. It must come out identical on every build: the engine
refuses to open an on-disk index whose schema differs, and that is the only
thing stopping a silent mismatch from corrupting the index.

Field handles (``MessageSchema.fields``) are the same objects the mapper
writes through, so a typo in a field name cannot reach the engine.
"""

from __future__ import annotations

from dataclasses import dataclass, fields as dataclass_fields
from datetime import datetime
from enum import Enum
from typing import Any, Iterator, Optional

U64_MAX = 2**64 - 1


class FieldType(str, Enum):
    U64 = "u64"
    TEXT = "text"
    TIMESTAMP = "timestamp"
    BOOLEAN = "bool"


@dataclass(frozen=True)
class SchemaField:
    """A named, typed slot in a document with its storage contract."""

    name: str
    value_type: FieldType
    multi_valued: bool = False
    stored: bool = False
    indexed: bool = False
    fast: bool = False
    # Only meaningful for TEXT: False means exact-match (raw) tokens.
    tokenized: bool = False

    def accepts(self, value: Any) -> bool:
        """Return True if value matches the declared type of this field."""

        if self.value_type is FieldType.U64:
            # bool is an int subclass but never a valid id.
            return (
                isinstance(value, int)
                and not isinstance(value, bool)
                and 0 <= value <= U64_MAX
            )
        if self.value_type is FieldType.TEXT:
            return isinstance(value, str)
        if self.value_type is FieldType.TIMESTAMP:
            return isinstance(value, datetime) and value.tzinfo is not None
        if self.value_type is FieldType.BOOLEAN:
            return isinstance(value, bool)
        return False


@dataclass(frozen=True)
class MessageFields:
    """Named handles for every field of the message schema."""

    # message id, never searched; a message link is enough to find it
    id: SchemaField
    author_id: SchemaField
    # fast so queries can filter by the channels a user can read
    channel_id: SchemaField

    # stored so it can be shown in search results
    content: SchemaField
    # for "before" leave the lower bound open, for "after" use now as the upper bound
    timestamp: SchemaField
    pinned: SchemaField

    # searched but never shown, so not stored
    embed_content: SchemaField
    mention_user_id: SchemaField
    mention_role_id: SchemaField
    # values come from MediaCategory, single words, so no tokenizing
    has: SchemaField

    def __iter__(self) -> Iterator[SchemaField]:
        for item in dataclass_fields(self):
            yield getattr(self, item.name)


@dataclass(frozen=True)
class MessageSchema:
    """Immutable schema plus the field handles used to fill documents."""

    fields: MessageFields

    @classmethod
    def build(cls) -> "MessageSchema":
        """Build the message schema. Pure; equal result on every call."""

        return cls(
            fields=MessageFields(
                id=SchemaField("id", FieldType.U64, stored=True),
                author_id=SchemaField("author_id", FieldType.U64, indexed=True),
                channel_id=SchemaField("channel_id", FieldType.U64, indexed=True, fast=True),
                content=SchemaField(
                    "content", FieldType.TEXT, stored=True, indexed=True, tokenized=True
                ),
                timestamp=SchemaField("timestamp", FieldType.TIMESTAMP, indexed=True),
                pinned=SchemaField("pinned", FieldType.BOOLEAN, indexed=True),
                embed_content=SchemaField(
                    "embed_content", FieldType.TEXT, multi_valued=True, indexed=True, tokenized=True
                ),
                mention_user_id=SchemaField(
                    "mention_user_id", FieldType.U64, multi_valued=True, indexed=True
                ),
                mention_role_id=SchemaField(
                    "mention_role_id", FieldType.U64, multi_valued=True, indexed=True
                ),
                has=SchemaField("has", FieldType.TEXT, multi_valued=True, indexed=True),
            )
        )

    def __iter__(self) -> Iterator[SchemaField]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(dataclass_fields(self.fields))

    def field_names(self) -> list[str]:
        return [field.name for field in self]

    def field(self, name: str) -> SchemaField:
        """Return the field handle with the given name."""

        for field in self:
            if field.name == name:
                return field
        raise KeyError(f"Unknown schema field: {name}")

    def describe(self) -> list[dict[str, Any]]:
        """Return the field table as plain rows, in declaration order."""

        return [
            {
                "name": field.name,
                "type": field.value_type.value,
                "multi_valued": field.multi_valued,
                "stored": field.stored,
                "indexed": field.indexed,
                "fast": field.fast,
                "tokenized": field.tokenized,
            }
            for field in self
        ]

    def new_document(self) -> "Document":
        return Document(self)


class Document:
    """One record conforming to a MessageSchema.

    Values are kept per field name as lists. Single-valued fields accept
    exactly one write; multi-valued fields accumulate.
    """

    def __init__(self, schema: MessageSchema) -> None:
        self._schema = schema
        self._values: dict[str, list[Any]] = {}

    @property
    def schema(self) -> MessageSchema:
        return self._schema

    def add(self, field: SchemaField, value: Any) -> None:
        """Write one value into a field, checking type and cardinality."""

        if self._schema.field(field.name) != field:
            raise KeyError(f"Field {field.name} does not belong to this schema")
        if not field.accepts(value):
            raise TypeError(
                f"Value {value!r} does not match type {field.value_type.value} of field {field.name}"
            )
        values = self._values.setdefault(field.name, [])
        if values and not field.multi_valued:
            raise ValueError(f"Field {field.name} is single-valued and already set")
        values.append(value)

    def get_all(self, field: SchemaField) -> list[Any]:
        return list(self._values.get(field.name, []))

    def get_first(self, field: SchemaField) -> Optional[Any]:
        values = self._values.get(field.name)
        return values[0] if values else None

    def items(self) -> Iterator[tuple[SchemaField, list[Any]]]:
        """Yield (field, values) for every field that holds a value."""

        for field in self._schema:
            values = self._values.get(field.name)
            if values:
                yield field, list(values)

    def to_dict(self) -> dict[str, list[Any]]:
        return {field.name: values for field, values in self.items()}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return self._schema == other._schema and self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"Document({self.to_dict()!r})"
