"""Static configuration for seekcord.

All user-editable settings (index location, batching, logging) live in a
single JSON file for quick edits without touching Python. Secrets stay in
.env and are read by client.py.
"""

import json
import os

from core.config import IndexConfig

_SOURCE_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# SEEKCORD_CONFIG points at config.json when the package is not installed in
# editable mode, where the source tree is not next to the module.
CONFIG_PATH = os.path.abspath(
    os.getenv("SEEKCORD_CONFIG") or os.path.join(_SOURCE_ROOT, "config.json")
)

# Relative paths in config.json (index, log file) resolve against its directory.
PROJECT_ROOT = os.path.dirname(CONFIG_PATH)


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _resolve_path(path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Index location and write batching.
# - path: directory of the on-disk index, relative to the project root
# - commit_every: number of documents per commit
# - writer_heap_mb: memory budget of the index writer
_index = _CONFIG.get("index", {})
INDEX_CONFIG = IndexConfig(
    path=_resolve_path(_index.get("path", "index")),
    commit_every=int(_index.get("commit_every", 20)),
    writer_heap_mb=int(_index.get("writer_heap_mb", 64)),
)

# Messages from bot accounts (including this one) are skipped by default.
_discord = _CONFIG.get("discord", {})
IGNORE_BOTS = bool(_discord.get("ignore_bots", True))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
