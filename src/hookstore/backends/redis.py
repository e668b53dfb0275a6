"""Redis storage backend - Network-accessible key-value store using Redis"""

import json
import logging
from typing import Any

import redis.asyncio as redis

from hookstore.config import Settings

from .base import StorageBackend, deep_merge

logger = logging.getLogger(__name__)


class RedisStorage(StorageBackend):
    """Redis-based storage backend.

    Keys are namespaced with ``settings.redis_prefix`` so :meth:`clear` and
    :meth:`get_all_keys` only touch keys this backend owns. Values are stored
    as JSON so non-string values keep their type across a round trip.
    """

    def __init__(self, settings: Settings, client: "redis.Redis | None" = None):
        self.prefix = settings.redis_prefix
        self.client = client or redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            password=settings.redis_password or None,
            db=settings.redis_db,
            decode_responses=True  # Return strings instead of bytes
        )
        logger.info(f"Redis storage configured: {settings.redis_host}:{settings.redis_port}")

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def _serialize(self, value: Any) -> str:
        return json.dumps(value)

    def _deserialize(self, data: str | None) -> Any:
        if data is None:
            return None
        return json.loads(data)

    async def get_item(self, key: str) -> Any:
        return self._deserialize(await self.client.get(self._key(key)))

    async def set_item(self, key: str, value: Any) -> None:
        await self.client.set(self._key(key), self._serialize(value))

    async def remove_item(self, key: str) -> None:
        await self.client.delete(self._key(key))

    async def merge_item(self, key: str, value: Any) -> None:
        current = await self.get_item(key)
        await self.set_item(key, deep_merge(current, value))

    async def clear(self) -> None:
        keys = [k async for k in self.client.scan_iter(match=f"{self.prefix}*")]
        if keys:
            await self.client.delete(*keys)
        logger.info(f"Cleared {len(keys)} keys with prefix {self.prefix}")

    async def get_all_keys(self) -> list[str]:
        return [
            k[len(self.prefix):]
            async for k in self.client.scan_iter(match=f"{self.prefix}*")
        ]

    async def multi_get(self, keys: list[str]) -> list[list[Any]]:
        if not keys:
            return []
        values = await self.client.mget([self._key(k) for k in keys])
        return [[k, self._deserialize(v)] for k, v in zip(keys, values)]

    async def multi_set(self, pairs: list[tuple[str, Any]]) -> None:
        if not pairs:
            return
        # Use pipeline for atomic operation
        pipe = self.client.pipeline()
        for key, value in pairs:
            pipe.set(self._key(key), self._serialize(value))
        await pipe.execute()

    async def multi_remove(self, keys: list[str]) -> None:
        if keys:
            await self.client.delete(*[self._key(k) for k in keys])

    async def close(self) -> None:
        await self.client.aclose()
