"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core and adapters expect so the app layer can build them safely.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class IndexConfig:
    """Search index settings consumed by the indexer and index adapter."""

    path: str
    commit_every: int = 20
    writer_heap_mb: int = 64
