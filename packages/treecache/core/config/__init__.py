"""Configuration models and loaders."""

from treecache.core.config.loader import detect_format, load_cache_config, load_config
from treecache.core.config.models import CacheConfig, LoggingConfig

__all__ = [
    "CacheConfig",
    "LoggingConfig",
    "detect_format",
    "load_cache_config",
    "load_config",
]
