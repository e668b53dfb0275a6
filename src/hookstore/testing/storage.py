"""Storage backend contract tests."""

import uuid
from abc import ABC, abstractmethod

import pytest


class StorageBackendContractTest(ABC):
    """Base class for StorageBackend contract tests."""

    @pytest.fixture
    @abstractmethod
    def backend(self):
        """Create the backend instance under test."""
        pass

    @pytest.fixture
    def key(self) -> str:
        return f"test-key-{uuid.uuid4().hex[:8]}"

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, backend, key):
        """get_item() must return None for a missing key."""
        assert await backend.get_item(key) is None

    @pytest.mark.asyncio
    async def test_set_then_get(self, backend, key):
        """set_item() must make the value readable."""
        await backend.set_item(key, "value")

        assert await backend.get_item(key) == "value"

    @pytest.mark.asyncio
    async def test_falsy_values_round_trip(self, backend, key):
        """False, '' and None must come back with the same type."""
        for value in (False, "", None, 0):
            await backend.set_item(key, value)
            result = await backend.get_item(key)
            assert result == value
            assert type(result) is type(value)

    @pytest.mark.asyncio
    async def test_remove_item(self, backend, key):
        """remove_item() must delete the key; missing keys are not an error."""
        await backend.set_item(key, "value")
        await backend.remove_item(key)
        await backend.remove_item(key)

        assert await backend.get_item(key) is None

    @pytest.mark.asyncio
    async def test_merge_item_merges_mappings(self, backend, key):
        """merge_item() must deep-merge mappings."""
        await backend.set_item(key, {"a": 1, "nested": {"x": 1}})
        await backend.merge_item(key, {"b": 2, "nested": {"y": 2}})

        assert await backend.get_item(key) == {"a": 1, "b": 2, "nested": {"x": 1, "y": 2}}

    @pytest.mark.asyncio
    async def test_get_all_keys(self, backend, key):
        """get_all_keys() must list stored keys."""
        await backend.set_item(key, "value")

        assert key in await backend.get_all_keys()

    @pytest.mark.asyncio
    async def test_multi_set_then_multi_get_keeps_order(self, backend, key):
        """multi_get() must return [key, value] pairs in request order."""
        first, second = f"{key}-1", f"{key}-2"
        await backend.multi_set([(first, "one"), (second, "two")])

        assert await backend.multi_get([second, first]) == [[second, "two"], [first, "one"]]

    @pytest.mark.asyncio
    async def test_multi_remove(self, backend, key):
        """multi_remove() must delete every listed key."""
        first, second = f"{key}-1", f"{key}-2"
        await backend.multi_set([(first, "one"), (second, "two")])
        await backend.multi_remove([first, second])

        assert await backend.multi_get([first, second]) == [[first, None], [second, None]]

    @pytest.mark.asyncio
    async def test_clear(self, backend, key):
        """clear() must remove every key."""
        await backend.set_item(key, "value")
        await backend.clear()

        assert await backend.get_all_keys() == []
