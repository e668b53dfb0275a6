"""Tests for the Redis storage backend using a mocked client"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

pytest.importorskip("redis")

from hookstore.backends.redis import RedisStorage  # noqa: E402


async def _aiter(items):
    for item in items:
        yield item


@pytest.fixture
def client():
    client = MagicMock()
    client.get = AsyncMock(return_value=None)
    client.set = AsyncMock()
    client.delete = AsyncMock()
    client.mget = AsyncMock(return_value=[])
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def redis_backend(settings, client):
    return RedisStorage(settings, client=client)


class TestRedisStorage:
    """Tests for RedisStorage"""

    @pytest.mark.asyncio
    async def test_set_item_serializes_with_prefix(self, redis_backend, client):
        await redis_backend.set_item("k", {"a": 1})
        client.set.assert_awaited_once_with("hookstore:k", '{"a": 1}')

    @pytest.mark.asyncio
    async def test_get_item_deserializes(self, redis_backend, client):
        client.get.return_value = json.dumps(False)

        assert await redis_backend.get_item("k") is False
        client.get.assert_awaited_once_with("hookstore:k")

    @pytest.mark.asyncio
    async def test_get_missing_key(self, redis_backend, client):
        assert await redis_backend.get_item("k") is None

    @pytest.mark.asyncio
    async def test_remove_item(self, redis_backend, client):
        await redis_backend.remove_item("k")
        client.delete.assert_awaited_once_with("hookstore:k")

    @pytest.mark.asyncio
    async def test_merge_item(self, redis_backend, client):
        client.get.return_value = '{"a": 1}'

        await redis_backend.merge_item("k", {"b": 2})
        client.set.assert_awaited_once_with("hookstore:k", '{"a": 1, "b": 2}')

    @pytest.mark.asyncio
    async def test_get_all_keys_strips_prefix(self, redis_backend, client):
        client.scan_iter = MagicMock(return_value=_aiter(["hookstore:a", "hookstore:b"]))

        assert await redis_backend.get_all_keys() == ["a", "b"]
        client.scan_iter.assert_called_once_with(match="hookstore:*")

    @pytest.mark.asyncio
    async def test_clear_deletes_prefixed_keys(self, redis_backend, client):
        client.scan_iter = MagicMock(return_value=_aiter(["hookstore:a"]))

        await redis_backend.clear()
        client.delete.assert_awaited_once_with("hookstore:a")

    @pytest.mark.asyncio
    async def test_clear_empty(self, redis_backend, client):
        client.scan_iter = MagicMock(return_value=_aiter([]))

        await redis_backend.clear()
        client.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_multi_get_uses_mget(self, redis_backend, client):
        client.mget.return_value = ['"one"', None]

        assert await redis_backend.multi_get(["a", "b"]) == [["a", "one"], ["b", None]]
        client.mget.assert_awaited_once_with(["hookstore:a", "hookstore:b"])

    @pytest.mark.asyncio
    async def test_multi_set_uses_pipeline(self, redis_backend, client):
        pipe = MagicMock()
        pipe.execute = AsyncMock()
        client.pipeline.return_value = pipe

        await redis_backend.multi_set([("a", 1), ("b", "")])

        assert pipe.set.call_count == 2
        pipe.set.assert_any_call("hookstore:b", '""')
        pipe.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_multi_remove(self, redis_backend, client):
        await redis_backend.multi_remove(["a", "b"])
        client.delete.assert_awaited_once_with("hookstore:a", "hookstore:b")

    @pytest.mark.asyncio
    async def test_close(self, redis_backend, client):
        await redis_backend.close()
        client.aclose.assert_awaited_once()
