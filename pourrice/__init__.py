"""Asyncio client for the Pour Rice restaurant backend."""

__version__ = "0.1.0"
