"""Ports (interfaces) used by the core pipeline.

The index port is the only outbound contract: the core hands finished
documents over and keeps no reference to them.
"""

from __future__ import annotations

from typing import Protocol

from core.schema import Document


class IndexPort(Protocol):
    """Write path of the search index required by the core pipeline."""

    def add_document(self, document: Document) -> None:
        ...

    def commit(self) -> None:
        ...
