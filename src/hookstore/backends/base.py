"""Base backend interface - the key-value capability hooks are placed in front of"""

from abc import ABC, abstractmethod
from typing import Any


class StorageBackend(ABC):
    """Abstract base class for storage backends

    Backends are plain async key-value stores. They know nothing about hooks;
    the engine calls them exactly once per proxied operation.
    """

    @abstractmethod
    async def get_item(self, key: str) -> Any:
        """
        Read the value stored for a key

        Args:
            key: Key to read

        Returns:
            Stored value, or None when the key does not exist
        """
        pass

    @abstractmethod
    async def set_item(self, key: str, value: Any) -> None:
        """Store a value, replacing any previous one"""
        pass

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        """Remove a key. Removing a missing key is not an error."""
        pass

    @abstractmethod
    async def merge_item(self, key: str, value: Any) -> None:
        """
        Merge a value into the one already stored

        Mappings are merged recursively; anything else replaces the stored
        value.
        """
        pass

    @abstractmethod
    async def clear(self) -> None:
        """Remove every key owned by this backend"""
        pass

    @abstractmethod
    async def get_all_keys(self) -> list[str]:
        """List every stored key"""
        pass

    async def multi_get(self, keys: list[str]) -> list[list[Any]]:
        """
        Read several keys at once

        Returns:
            ``[[key, value], ...]`` in the order the keys were requested
        """
        return [[key, await self.get_item(key)] for key in keys]

    async def multi_set(self, pairs: list[tuple[str, Any]]) -> None:
        for key, value in pairs:
            await self.set_item(key, value)

    async def multi_merge(self, pairs: list[tuple[str, Any]]) -> None:
        for key, value in pairs:
            await self.merge_item(key, value)

    async def multi_remove(self, keys: list[str]) -> None:
        for key in keys:
            await self.remove_item(key)

    async def flush_get_requests(self) -> None:
        """Flush batched reads. No-op for backends that do not batch."""
        pass

    async def close(self) -> None:
        """Release connections held by the backend"""
        pass

    def get_name(self) -> str:
        return self.__class__.__name__


def deep_merge(current: Any, update: Any) -> Any:
    """Recursively merge *update* into *current* without mutating either."""
    if not isinstance(current, dict) or not isinstance(update, dict):
        return update

    merged = dict(current)
    for key, value in update.items():
        merged[key] = deep_merge(merged.get(key), value)
    return merged
