"""Application entry point for the seekcord indexer."""

from __future__ import annotations

import argparse
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from dotenv import load_dotenv

import settings
from adapters.discord_mapper import build_raw_message
from adapters.tantivy_index import TantivyIndex
from client import build_client, load_token
from core.indexer import MessageIndexer
from core.schema import MessageSchema

NAME = "SEEKCORD"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    """Formatter that masks the Discord token wherever it shows up."""

    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        # Longest first so a secret containing another is masked whole.
        self._secrets = sorted({secret for secret in secrets if secret}, key=len, reverse=True)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _rotating_file_handler(file_cfg: dict) -> RotatingFileHandler:
    path = file_cfg.get("path", "logs/seekcord.log")
    if not os.path.isabs(path):
        path = os.path.join(settings.PROJECT_ROOT, path)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    return RotatingFileHandler(
        path,
        maxBytes=int(file_cfg.get("max_bytes", 5 * 1024 * 1024)),
        backupCount=int(file_cfg.get("backup_count", 5)),
        encoding="utf-8",
    )


def _configure_logging() -> None:
    """Log to the console and, if configured, to a rotating file."""

    config = settings.LOGGING or {}
    level = getattr(logging, str(config.get("level", "INFO")).upper(), logging.INFO)

    load_dotenv()
    formatter = _RedactingFormatter(
        [os.getenv("DISCORD_TOKEN", "")],
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        handlers.append(_rotating_file_handler(file_cfg))

    for handler in handlers:
        handler.setFormatter(formatter)
    logging.basicConfig(level=level, handlers=handlers)


def _open_index(schema: MessageSchema) -> TantivyIndex:
    config = settings.INDEX_CONFIG
    # SchemaMismatchError propagates: never run against an inconsistent index.
    return TantivyIndex.open(config.path, schema, writer_heap_mb=config.writer_heap_mb)


def _shutdown(indexer: MessageIndexer, index: TantivyIndex) -> None:
    """Commit pending documents and always release the writer lock."""

    try:
        indexer.flush()
    finally:
        index.close()


def _run() -> None:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)

    logger.info("Starting seekcord")

    token = load_token()
    schema = MessageSchema.build()
    index = _open_index(schema)
    indexer = MessageIndexer(schema, index, commit_every=settings.INDEX_CONFIG.commit_every)
    logger.info("Index has %s documents", index.num_docs())

    client = build_client()

    @client.event
    async def on_ready() -> None:
        logger.info("Logged in as %s", client.user)

    # Single handler keeps discord.py integration minimal and defers mapping
    # to the core indexer for consistency and testability.
    @client.event
    async def on_message(message) -> None:
        try:
            if message.guild is None:
                return
            if settings.IGNORE_BOTS and message.author.bot:
                return
            indexer.handle(build_raw_message(message))
        except Exception:
            logger.exception("Error while indexing message")

    try:
        # Logging is already configured above; keep discord.py from adding handlers.
        client.run(token, log_handler=None)
    finally:
        _shutdown(indexer, index)
        logger.info("Index closed")


def _print_schema() -> None:
    schema = MessageSchema.build()
    columns = ["name", "type", "multi_valued", "stored", "indexed", "fast", "tokenized"]
    print(" | ".join(columns))
    for row in schema.describe():
        print(" | ".join(str(row[column]) for column in columns))


def _stats() -> None:
    _configure_logging()
    index = _open_index(MessageSchema.build())
    print(f"{settings.INDEX_CONFIG.path}: {index.num_docs()} documents")


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="seekcord")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Connect to Discord and index new messages")
    subparsers.add_parser("schema", help="Print the search document schema")
    subparsers.add_parser("stats", help="Show the number of indexed messages")

    args = parser.parse_args(argv)
    if args.command == "schema":
        _print_schema()
        return
    if args.command == "stats":
        _stats()
        return
    _run()


if __name__ == "__main__":
    main()
