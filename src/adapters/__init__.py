"""Adapters between the core and discord.py / tantivy."""
