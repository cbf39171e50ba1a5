# =============================================================================
# GitHub Gateway - Redis Cache Store
# =============================================================================
"""
Redis-backed cache store.

Records are stored as a JSON envelope naming the record class, so they
come back as the same typed pydantic models:

    {"model": "Issue", "many": true, "data": [...]}

The store degrades gracefully: if Redis is unavailable, reads miss and
writes are skipped, and the gateway keeps working uncached.
"""

import json
import logging
from datetime import timedelta
from typing import Any, Optional

import redis.asyncio as redis

from ..models import RECORD_TYPES, GitHubRecord

logger = logging.getLogger(__name__)


class CacheSerializationError(ValueError):
    """Raised when a value cannot be stored in or restored from Redis."""

    pass


def encode_value(value: Any) -> bytes:
    """
    Serialize a record or list of records into the JSON envelope.

    Args:
        value: A GitHubRecord or a list of GitHubRecords.

    Returns:
        UTF-8 encoded envelope.

    Raises:
        CacheSerializationError: For values that are not records.
    """
    if isinstance(value, GitHubRecord):
        envelope = {
            "model": type(value).__name__,
            "many": False,
            "data": value.model_dump(mode="json"),
        }
    elif isinstance(value, list) and all(isinstance(v, GitHubRecord) for v in value):
        envelope = {
            "model": type(value[0]).__name__ if value else None,
            "many": True,
            "data": [v.model_dump(mode="json") for v in value],
        }
    else:
        raise CacheSerializationError(
            f"Cannot cache value of type {type(value).__name__}"
        )
    return json.dumps(envelope).encode("utf-8")


def decode_value(raw: bytes) -> Any:
    """
    Restore a record or list of records from the JSON envelope.

    Args:
        raw: Bytes previously produced by ``encode_value``.

    Returns:
        The typed record or list of records.

    Raises:
        CacheSerializationError: If the envelope is unknown or malformed.
    """
    envelope = json.loads(raw.decode("utf-8"))
    data = envelope.get("data")
    if envelope.get("many"):
        if not data:
            return []
        model = RECORD_TYPES.get(envelope.get("model") or "")
        if model is None:
            raise CacheSerializationError(f"Unknown record type: {envelope.get('model')}")
        return [model.model_validate(item) for item in data]

    model = RECORD_TYPES.get(envelope.get("model") or "")
    if model is None:
        raise CacheSerializationError(f"Unknown record type: {envelope.get('model')}")
    return model.model_validate(data)


class RedisCacheStore:
    """
    Redis cache store for gateway records.

    Attributes:
        redis: Redis async client instance.
        connected: Whether the Redis connection is active.
        key_prefix: Namespace prepended to every key.

    Example:
        cache = RedisCacheStore(redis_host="localhost")
        await cache.connect()
        gateway = GitHubGateway(transport, cache)
        ...
        await cache.close()
    """

    def __init__(
        self,
        redis_host: str = "localhost",
        redis_port: int = 6379,
        redis_db: int = 0,
        redis_password: Optional[str] = None,
        key_prefix: str = "github:",
        client: Optional[redis.Redis] = None,
    ) -> None:
        """
        Initialize the cache store.

        Args:
            redis_host: Redis server hostname.
            redis_port: Redis server port.
            redis_db: Redis database number.
            redis_password: Optional Redis password.
            key_prefix: Namespace prepended to every key.
            client: Pre-built Redis client; treated as connected.
        """
        self.redis_host = redis_host
        self.redis_port = redis_port
        self.redis_db = redis_db
        self.redis_password = redis_password
        self.key_prefix = key_prefix
        self.redis: Optional[redis.Redis] = client
        self.connected = client is not None

    async def connect(self) -> bool:
        """
        Connect to Redis server.

        Returns:
            True if connection successful, False otherwise.
        """
        try:
            self.redis = redis.Redis(
                host=self.redis_host,
                port=self.redis_port,
                db=self.redis_db,
                password=self.redis_password,
                decode_responses=False,
            )
            await self.redis.ping()
            self.connected = True
            logger.info(
                f"Connected to Redis at {self.redis_host}:{self.redis_port}/{self.redis_db}"
            )
            return True
        except redis.RedisError as e:
            logger.warning(f"Failed to connect to Redis: {e}. Caching disabled.")
            if self.redis is not None:
                await self.redis.aclose()
                self.redis = None
            self.connected = False
            return False

    async def close(self) -> None:
        """Close Redis connection."""
        if self.redis:
            await self.redis.aclose()
            self.connected = False
            logger.info("Closed Redis connection")

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    async def get(self, key: str) -> Optional[Any]:
        """
        Get a record from cache by key.

        Args:
            key: Cache key.

        Returns:
            Cached record(s) if present, None otherwise.
        """
        if not self.connected or not self.redis:
            return None
        try:
            raw = await self.redis.get(self._key(key))
        except redis.RedisError as e:
            logger.warning(f"Error getting key {key} from cache: {e}")
            return None
        if raw is None:
            return None
        try:
            return decode_value(raw)
        except ValueError as e:
            logger.warning(f"Discarding unreadable cache entry {key}: {e}")
            return None

    async def set(self, key: str, value: Any, ttl: timedelta) -> None:
        """
        Store record(s) with a time-to-live.

        Args:
            key: Cache key.
            value: Record or list of records.
            ttl: Time-to-live.
        """
        if not self.connected or not self.redis:
            return
        payload = encode_value(value)
        try:
            await self.redis.setex(self._key(key), ttl, payload)
        except redis.RedisError as e:
            logger.warning(f"Error setting key {key} in cache: {e}")

    async def remove(self, key: str) -> None:
        """
        Delete a key from cache.

        Args:
            key: Cache key to delete.
        """
        if not self.connected or not self.redis:
            return
        try:
            await self.redis.delete(self._key(key))
        except redis.RedisError as e:
            logger.warning(f"Error deleting key {key} from cache: {e}")
