"""Local cache storage."""

from .local_cache import LocalCacheStore, FileKeyValueStorage, MemoryKeyValueStorage

__all__ = ["LocalCacheStore", "FileKeyValueStorage", "MemoryKeyValueStorage"]
