"""Discord client factory for seekcord.

The token is read separately from client construction so the index can be
opened (and a schema mismatch reported) before any connection is attempted.
"""

from __future__ import annotations

import logging
import os

import discord
from dotenv import load_dotenv


def load_token() -> str:
    """Read DISCORD_TOKEN via python-dotenv to keep secrets out of the repo."""

    load_dotenv()

    token = os.getenv("DISCORD_TOKEN")
    # Fail fast on missing credentials rather than on the first gateway call.
    if not token:
        raise RuntimeError("Missing DISCORD_TOKEN in environment")
    return token


def build_intents() -> discord.Intents:
    """Intents needed to read guild messages and their content."""

    intents = discord.Intents.none()
    intents.guilds = True
    intents.guild_messages = True
    intents.message_content = True
    return intents


def build_client() -> discord.Client:
    """Create a discord.py client with the intents the indexer needs."""

    logging.getLogger(__name__).info("Initializing Discord client")

    return discord.Client(intents=build_intents())
