"""
Cache stores, TTL policy and key derivation for the GitHub gateway.
"""

import logging
from typing import Optional

from ..config import Settings, get_settings
from .policies import (
    TTL_CONFIG,
    CacheKind,
    cache_key,
    get_ttl,
    invalidation_keys,
    issue_key,
    issues_key,
    labels_key,
    milestones_key,
    project_key,
    pulls_key,
    repositories_key,
)
from .redis_store import RedisCacheStore
from .store import CacheEntry, CacheStore, MemoryCacheStore

logger = logging.getLogger(__name__)


async def create_cache_store(settings: Optional[Settings] = None) -> CacheStore:
    """
    Build the cache store selected by settings.

    The returned store's lifetime belongs to the caller. When Redis is
    selected but unreachable, an in-memory store is returned instead.

    Args:
        settings: Gateway settings; defaults to the cached settings.

    Returns:
        A ready-to-use cache store.
    """
    settings = settings or get_settings()

    if settings.cache_backend == "redis":
        store = RedisCacheStore(
            redis_host=settings.redis_host,
            redis_port=settings.redis_port,
            redis_db=settings.redis_db,
            redis_password=settings.redis_password,
            key_prefix=settings.redis_key_prefix,
        )
        if await store.connect():
            return store
        logger.warning("Redis unavailable, falling back to in-memory cache")

    return MemoryCacheStore()


__all__ = [
    # Stores
    "CacheStore",
    "CacheEntry",
    "MemoryCacheStore",
    "RedisCacheStore",
    "create_cache_store",
    # Policies
    "CacheKind",
    "TTL_CONFIG",
    "get_ttl",
    "cache_key",
    "invalidation_keys",
    "repositories_key",
    "issues_key",
    "issue_key",
    "project_key",
    "milestones_key",
    "labels_key",
    "pulls_key",
]
