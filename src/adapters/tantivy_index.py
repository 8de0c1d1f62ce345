"""Tantivy search index adapter.

Implements the core IndexPort on an on-disk tantivy index. The core schema
is translated field by field, so the engine sees exactly the storage
contract declared in core.schema.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

import tantivy

from core.schema import Document, FieldType, MessageSchema, SchemaField

LOGGER = logging.getLogger(__name__)


class SchemaMismatchError(RuntimeError):
    """Raised when an existing index was built with a different schema."""


def _add_field(builder: tantivy.SchemaBuilder, field: SchemaField) -> None:
    if field.value_type is FieldType.TEXT:
        if not field.indexed:
            raise ValueError(f"Text field {field.name} must be indexed")
        if field.tokenized:
            builder.add_text_field(field.name, stored=field.stored, fast=field.fast)
        else:
            builder.add_text_field(
                field.name,
                stored=field.stored,
                fast=field.fast,
                tokenizer_name="raw",
                index_option="basic",
            )
    elif field.value_type is FieldType.U64:
        builder.add_unsigned_field(
            field.name, stored=field.stored, indexed=field.indexed, fast=field.fast
        )
    elif field.value_type is FieldType.TIMESTAMP:
        builder.add_date_field(
            field.name, stored=field.stored, indexed=field.indexed, fast=field.fast
        )
    elif field.value_type is FieldType.BOOLEAN:
        builder.add_boolean_field(
            field.name, stored=field.stored, indexed=field.indexed, fast=field.fast
        )
    else:
        raise ValueError(f"Unsupported field type: {field.value_type}")


def build_tantivy_schema(schema: MessageSchema) -> tantivy.Schema:
    """Translate the core schema into a tantivy schema."""

    builder = tantivy.SchemaBuilder()
    for field in schema:
        _add_field(builder, field)
    return builder.build()


def to_tantivy_document(document: Document) -> tantivy.Document:
    """Convert a core document into a tantivy document."""

    result = tantivy.Document()
    for field, values in document.items():
        for value in values:
            if field.value_type is FieldType.TEXT:
                result.add_text(field.name, value)
            elif field.value_type is FieldType.U64:
                result.add_unsigned(field.name, value)
            elif field.value_type is FieldType.TIMESTAMP:
                result.add_date(field.name, value)
            elif field.value_type is FieldType.BOOLEAN:
                result.add_boolean(field.name, value)
    return result


class TantivyIndex:
    """Thin tantivy wrapper that satisfies the IndexPort contract."""

    def __init__(self, index: tantivy.Index, writer_heap_mb: int = 64) -> None:
        self._index = index
        self._writer_heap_bytes = writer_heap_mb * 1024 * 1024
        self._writer: Optional[tantivy.IndexWriter] = None

    @classmethod
    def open(cls, path: str, schema: MessageSchema, writer_heap_mb: int = 64) -> "TantivyIndex":
        """Open the index at path, creating it if it does not exist.

        Raises SchemaMismatchError if an index exists there with a
        different schema; callers should treat that as fatal.
        """

        os.makedirs(path, exist_ok=True)
        existed = tantivy.Index.exists(path)
        try:
            index = tantivy.Index(build_tantivy_schema(schema), path=path, reuse=True)
        except ValueError as exc:
            if existed:
                raise SchemaMismatchError(
                    f"Index at {path} does not match the message schema: {exc}"
                ) from exc
            raise
        LOGGER.info("%s index at %s", "Opened" if existed else "Created", path)
        return cls(index, writer_heap_mb=writer_heap_mb)

    @property
    def index(self) -> tantivy.Index:
        return self._index

    def _get_writer(self) -> tantivy.IndexWriter:
        if self._writer is None:
            self._writer = self._index.writer(heap_size=self._writer_heap_bytes)
        return self._writer

    def add_document(self, document: Document) -> None:
        """Queue one document for the next commit."""

        self._get_writer().add_document(to_tantivy_document(document))

    def commit(self) -> None:
        """Commit queued documents and make them visible to searchers."""

        if self._writer is None:
            return
        self._writer.commit()
        self._index.reload()

    def num_docs(self) -> int:
        """Return the number of committed documents."""

        self._index.reload()
        return self._index.searcher().num_docs

    def close(self) -> None:
        """Commit and release the writer lock."""

        if self._writer is None:
            return
        writer, self._writer = self._writer, None
        try:
            writer.commit()
        finally:
            writer.wait_merging_threads()
