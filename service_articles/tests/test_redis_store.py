"""
Unit tests for the Redis-backed KeyValueStore.
"""

import pytest
from unittest.mock import AsyncMock, patch
from redis.exceptions import ConnectionError as RedisConnectionError

from shared.errors import StoreUnavailableError
from service_articles.app.cache.store import RedisKeyValueStore


class TestRedisKeyValueStore:
    """Test cases for RedisKeyValueStore."""

    @pytest.fixture
    def redis_client(self):
        client = AsyncMock()
        client.ping = AsyncMock(return_value=True)
        client.get = AsyncMock(return_value=None)
        client.set = AsyncMock(return_value=True)
        return client

    @pytest.fixture
    def kv_store(self, redis_client):
        store = RedisKeyValueStore("redis://localhost:6379/0")
        store.redis = redis_client
        return store

    @pytest.mark.asyncio
    async def test_start_uses_raw_bytes(self, redis_client):
        store = RedisKeyValueStore("redis://localhost:6379/0")

        with patch("service_articles.app.cache.store.redis.from_url", return_value=redis_client) as mock_from_url:
            await store.start()

        assert mock_from_url.call_args.kwargs["decode_responses"] is False
        redis_client.ping.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_start_tolerates_unreachable_server(self, redis_client):
        redis_client.ping.side_effect = RedisConnectionError("refused")
        store = RedisKeyValueStore("redis://localhost:6379/0")

        with patch("service_articles.app.cache.store.redis.from_url", return_value=redis_client):
            await store.start()

        assert await store.health_check() is False

    @pytest.mark.asyncio
    async def test_get_returns_value(self, kv_store, redis_client):
        redis_client.get.return_value = b'{"id":1}'

        assert await kv_store.get("article:a") == b'{"id":1}'
        redis_client.get.assert_awaited_once_with("article:a")

    @pytest.mark.asyncio
    async def test_get_absent_returns_none(self, kv_store):
        assert await kv_store.get("article:missing") is None

    @pytest.mark.asyncio
    async def test_put_sets_without_expiry(self, kv_store, redis_client):
        await kv_store.put("articles-summary", b"[]")

        redis_client.set.assert_awaited_once_with("articles-summary", b"[]")

    @pytest.mark.asyncio
    async def test_transport_errors_become_store_unavailable(self, kv_store, redis_client):
        redis_client.get.side_effect = RedisConnectionError("refused")
        redis_client.set.side_effect = RedisConnectionError("refused")

        with pytest.raises(StoreUnavailableError):
            await kv_store.get("article:a")
        with pytest.raises(StoreUnavailableError) as exc_info:
            await kv_store.put("article:a", b"{}")

        assert exc_info.value.details["operation"] == "put"

    @pytest.mark.asyncio
    async def test_unstarted_store_is_unavailable(self):
        store = RedisKeyValueStore("redis://localhost:6379/0")

        with pytest.raises(StoreUnavailableError):
            await store.get("article:a")
        assert await store.health_check() is False

    @pytest.mark.asyncio
    async def test_stop_closes_client(self, kv_store, redis_client):
        await kv_store.stop()

        redis_client.aclose.assert_awaited_once()
        assert kv_store.redis is None
