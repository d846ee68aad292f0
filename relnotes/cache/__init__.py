"""Response caches for remote metadata."""

from .store import BaseCache, FileCache, MemoryCache

__all__ = ["BaseCache", "FileCache", "MemoryCache"]
