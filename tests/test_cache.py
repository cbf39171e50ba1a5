"""
Unit tests for the cache stores and the TTL/key policy.
"""

from datetime import timedelta
from typing import Optional

import pytest
import redis.asyncio as redis

from github_gateway.cache import (
    TTL_CONFIG,
    CacheKind,
    MemoryCacheStore,
    RedisCacheStore,
    create_cache_store,
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
from github_gateway.cache.redis_store import CacheSerializationError, decode_value, encode_value
from github_gateway.config import Settings
from github_gateway.models import Issue, Label

from .conftest import FakeClock
from .payloads import issue_payload, label_payload


# -----------------------------------------------------------------------------
# Fakes
# -----------------------------------------------------------------------------
class FakeRedis:
    """Minimal stand-in for the redis.asyncio client used by the store."""

    def __init__(self, fail: bool = False) -> None:
        self.data: dict[str, bytes] = {}
        self.ttls: dict[str, timedelta] = {}
        self.fail = fail

    async def get(self, key: str) -> Optional[bytes]:
        if self.fail:
            raise redis.ConnectionError("connection refused")
        return self.data.get(key)

    async def setex(self, key: str, ttl: timedelta, value: bytes) -> None:
        if self.fail:
            raise redis.ConnectionError("connection refused")
        self.data[key] = value
        self.ttls[key] = ttl

    async def delete(self, key: str) -> None:
        if self.fail:
            raise redis.ConnectionError("connection refused")
        self.data.pop(key, None)


class UnreachableRedis:
    """Client whose ping always fails."""

    def __init__(self) -> None:
        self.closed = False

    async def ping(self) -> bool:
        raise redis.ConnectionError("connection refused")

    async def aclose(self) -> None:
        self.closed = True


# -----------------------------------------------------------------------------
# Policies
# -----------------------------------------------------------------------------
class TestCachePolicies:
    """Tests for TTLs and key derivation."""

    def test_ttl_table(self) -> None:
        """Test the fixed TTL per resource kind."""
        assert get_ttl(CacheKind.REPOSITORIES) == timedelta(minutes=10)
        assert get_ttl(CacheKind.ISSUES) == timedelta(minutes=5)
        assert get_ttl(CacheKind.ISSUE) == timedelta(minutes=5)
        assert get_ttl(CacheKind.PROJECT) == timedelta(minutes=10)
        assert get_ttl(CacheKind.MILESTONES) == timedelta(minutes=15)
        assert get_ttl(CacheKind.LABELS) == timedelta(minutes=60)
        assert get_ttl(CacheKind.PULLS) == timedelta(minutes=5)

    def test_every_kind_has_a_ttl(self) -> None:
        """Test that no cached kind is missing from the table."""
        assert set(TTL_CONFIG) == set(CacheKind)

    def test_keys(self) -> None:
        """Test key derivation for each resource."""
        assert repositories_key() == "user_repositories"
        assert issues_key("acme", "widgets") == "issues_acme_widgets"
        assert issue_key("acme", "widgets", 42) == "issue_acme_widgets_42"
        assert project_key("octocat", 3) == "project_octocat_3"
        assert milestones_key("acme", "widgets") == "milestones_acme_widgets"
        assert labels_key("acme", "widgets") == "labels_acme_widgets"
        assert pulls_key("acme", "widgets") == "pulls_acme_widgets"

    def test_underscore_collision_is_possible(self) -> None:
        """Test the documented boundary case of underscores in names."""
        assert issues_key("acme", "big_widgets") == issues_key("acme_big", "widgets")

    def test_invalidation_keys(self) -> None:
        """Test which reads each mutation invalidates."""
        assert invalidation_keys("create_issue", "acme", "widgets") == [
            "issues_acme_widgets"
        ]
        assert invalidation_keys("update_issue", "acme", "widgets", 42) == [
            "issue_acme_widgets_42",
            "issues_acme_widgets",
        ]
        assert invalidation_keys("create_milestone", "acme", "widgets") == [
            "milestones_acme_widgets"
        ]
        assert invalidation_keys("create_label", "acme", "widgets") == [
            "labels_acme_widgets"
        ]

    def test_unknown_mutation(self) -> None:
        """Test that an unknown mutation name raises."""
        with pytest.raises(ValueError):
            invalidation_keys("delete_repo", "acme", "widgets")


# -----------------------------------------------------------------------------
# Memory Store
# -----------------------------------------------------------------------------
class TestMemoryCacheStore:
    """Tests for the in-process cache store."""

    @pytest.mark.asyncio
    async def test_set_then_get(self, cache: MemoryCacheStore) -> None:
        """Test that a stored value is returned."""
        await cache.set("k", ["v"], timedelta(minutes=1))

        assert await cache.get("k") == ["v"]

    @pytest.mark.asyncio
    async def test_missing_key(self, cache: MemoryCacheStore) -> None:
        """Test that an unknown key is absent."""
        assert await cache.get("nope") is None

    @pytest.mark.asyncio
    async def test_entry_expires_lazily(
        self, cache: MemoryCacheStore, clock: FakeClock
    ) -> None:
        """Test that an entry is served until its TTL and dropped after."""
        await cache.set("k", "v", timedelta(minutes=5))

        clock.advance(timedelta(minutes=4, seconds=59))
        assert await cache.get("k") == "v"

        clock.advance(timedelta(seconds=1))
        assert await cache.get("k") is None
        assert "k" not in cache

    @pytest.mark.asyncio
    async def test_remove(self, cache: MemoryCacheStore) -> None:
        """Test that removing a key drops it and removing twice is harmless."""
        await cache.set("k", "v", timedelta(minutes=1))

        await cache.remove("k")
        await cache.remove("k")

        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_clear(self, cache: MemoryCacheStore) -> None:
        """Test clearing all entries."""
        await cache.set("a", 1, timedelta(minutes=1))
        await cache.set("b", 2, timedelta(minutes=1))

        assert cache.clear() == 2
        assert len(cache) == 0


# -----------------------------------------------------------------------------
# Redis Store
# -----------------------------------------------------------------------------
class TestRedisEnvelope:
    """Tests for the JSON envelope used by the Redis store."""

    def test_list_of_records(self) -> None:
        """Test that a list of issues comes back as typed issues."""
        issues = [
            Issue.model_validate(issue_payload(1, pull_request=True)),
            Issue.model_validate(issue_payload(2)),
        ]

        restored = decode_value(encode_value(issues))

        assert restored == issues
        assert restored[0].is_pull_request is True

    def test_empty_list(self) -> None:
        """Test that an empty list survives the envelope."""
        assert decode_value(encode_value([])) == []

    def test_label_alias_survives(self) -> None:
        """Test that ``is_default`` is restored from its dumped name."""
        label = Label.model_validate(label_payload())

        assert decode_value(encode_value(label)).is_default is True

    def test_rejects_non_records(self) -> None:
        """Test that arbitrary values cannot be stored."""
        with pytest.raises(CacheSerializationError):
            encode_value({"plain": "dict"})

    def test_unknown_model(self) -> None:
        """Test that an envelope naming an unknown record fails."""
        with pytest.raises(CacheSerializationError):
            decode_value(b'{"model": "Gist", "many": false, "data": {}}')


class TestRedisCacheStore:
    """Tests for the Redis cache store against a fake client."""

    @pytest.mark.asyncio
    async def test_set_get_remove(self) -> None:
        """Test prefixing, TTL and round trip through the fake client."""
        client = FakeRedis()
        store = RedisCacheStore(client=client, key_prefix="test:")
        labels = [Label.model_validate(label_payload())]

        await store.set("labels_acme_widgets", labels, timedelta(hours=1))

        assert client.ttls["test:labels_acme_widgets"] == timedelta(hours=1)
        assert await store.get("labels_acme_widgets") == labels

        await store.remove("labels_acme_widgets")
        assert await store.get("labels_acme_widgets") is None

    @pytest.mark.asyncio
    async def test_unreadable_entry_is_a_miss(self) -> None:
        """Test that garbage in Redis is treated as absent."""
        client = FakeRedis()
        client.data["github:k"] = b"not json"
        store = RedisCacheStore(client=client)

        assert await store.get("k") is None

    @pytest.mark.asyncio
    async def test_redis_errors_degrade(self) -> None:
        """Test that Redis failures become misses and no-ops."""
        store = RedisCacheStore(client=FakeRedis(fail=True))

        await store.set("k", [], timedelta(minutes=1))
        await store.remove("k")
        assert await store.get("k") is None

    @pytest.mark.asyncio
    async def test_failed_connect_closes_client(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that a client whose ping fails is closed and dropped."""
        created: list[UnreachableRedis] = []

        def build(**kwargs: object) -> UnreachableRedis:
            client = UnreachableRedis()
            created.append(client)
            return client

        monkeypatch.setattr(redis, "Redis", build)
        store = RedisCacheStore()

        assert await store.connect() is False
        assert created[0].closed is True
        assert store.redis is None
        assert store.connected is False

    @pytest.mark.asyncio
    async def test_disconnected_store_is_inert(self) -> None:
        """Test that a store that never connected does nothing."""
        store = RedisCacheStore()

        await store.set("k", [], timedelta(minutes=1))
        assert await store.get("k") is None


class TestCreateCacheStore:
    """Tests for the cache store factory."""

    @pytest.mark.asyncio
    async def test_memory_backend(self) -> None:
        """Test that the default backend is in-memory."""
        store = await create_cache_store(Settings(cache_backend="memory"))

        assert isinstance(store, MemoryCacheStore)

    @pytest.mark.asyncio
    async def test_redis_unavailable_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the fallback to memory when Redis cannot be reached."""

        async def refuse(self: RedisCacheStore) -> bool:
            return False

        monkeypatch.setattr(RedisCacheStore, "connect", refuse)

        store = await create_cache_store(Settings(cache_backend="redis"))

        assert isinstance(store, MemoryCacheStore)
