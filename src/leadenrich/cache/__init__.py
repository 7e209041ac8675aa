"""
Cache Package

Enrichment memoization keyed by address fingerprint.
"""
from typing import Optional

from config.settings import settings
from src.leadenrich.cache.base import EnrichmentCache
from src.leadenrich.cache.memory import MemoryEnrichmentCache
from src.leadenrich.cache.redis_store import RedisEnrichmentCache


def build_cache(backend: Optional[str] = None) -> EnrichmentCache:
    """
    Build the cache backend named in settings ("memory" or "redis").
    """
    backend = (backend or settings.enrichment_cache_backend).lower()
    if backend == "memory":
        return MemoryEnrichmentCache()
    if backend == "redis":
        return RedisEnrichmentCache()
    raise ValueError(f"Unknown enrichment cache backend: {backend}")


__all__ = ["EnrichmentCache", "MemoryEnrichmentCache", "RedisEnrichmentCache", "build_cache"]
