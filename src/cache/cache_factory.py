# src/cache/cache_factory.py — v2
"""Factory for cache instantiation.

The host application owns the returned instance and its lifecycle
(including the background sweep); components receive it by injection.
"""

from __future__ import annotations

from originality.cache.base_cache import BaseCache
from originality.config.settings import Settings


def create_cache(settings: Settings | None = None) -> BaseCache | None:
    """Instantiate the configured cache.

    Args:
        settings: Application settings. Defaults to a 100-entry, 1 h cache.

    Returns:
        Configured BaseCache implementation, or None when caching is disabled.
    """
    from originality.cache.memory_cache import MemoryCache

    if settings is None:
        return MemoryCache()

    if not settings.cache_enabled:
        return None

    return MemoryCache(
        max_size=settings.cache_max_size,
        default_ttl_s=settings.cache_default_ttl_s,
        sweep_interval_s=settings.cache_sweep_interval_s,
    )
