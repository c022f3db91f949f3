"""Cache backends."""

from treecache.core.caching.backends.fs import FSCache, FSCacheSync

__all__ = ["FSCache", "FSCacheSync"]
