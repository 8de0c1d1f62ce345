"""Core indexing pipeline.

This module is integration-agnostic. It maps messages with the core mapper
and hands documents to an IndexPort, so the search engine can be swapped
without changes here.
"""

from __future__ import annotations

import logging

from core.mapper import MalformedMessageError, parse_message
from core.models import RawMessage
from core.ports import IndexPort
from core.schema import MessageSchema

LOGGER = logging.getLogger(__name__)


class MessageIndexer:
    """Maps messages to documents, batches them and commits to the index."""

    def __init__(self, schema: MessageSchema, index: IndexPort, commit_every: int = 1) -> None:
        if commit_every < 1:
            raise ValueError("commit_every must be at least 1")
        self._schema = schema
        self._index = index
        self._commit_every = commit_every
        self._pending = 0

    @property
    def pending(self) -> int:
        return self._pending

    def handle(self, message: RawMessage) -> bool:
        """Index one message. Returns False when the message was skipped."""

        try:
            document = parse_message(self._schema, message)
        except MalformedMessageError as exc:
            # Reject-and-skip: a bad message must not stop the stream.
            LOGGER.warning("Skipping message %s: %s", message.id, exc)
            return False

        self._index.add_document(document)
        self._pending += 1
        if self._pending >= self._commit_every:
            self.flush()
        return True

    def flush(self) -> None:
        """Commit pending documents, if any."""

        if not self._pending:
            return
        self._index.commit()
        LOGGER.debug("Committed %s documents", self._pending)
        self._pending = 0
