"""Core domain package for seekcord.

Core contains the search schema, media classification and message mapping
without any Discord or search-engine code, keeping the mapping logic portable.
"""
