"""Tests for the in-memory storage backend"""

import json

import pytest

from hookstore.backends.memory import MemoryStorage
from hookstore.testing import StorageBackendContractTest


class TestMemoryStorageContract(StorageBackendContractTest):
    """Run the backend contract against MemoryStorage"""

    @pytest.fixture
    def backend(self):
        return MemoryStorage()


class TestMemoryStorage:
    """MemoryStorage specific behavior"""

    @pytest.mark.asyncio
    async def test_returned_values_are_copies(self, backend):
        await backend.set_item("k", {"items": [1]})

        value = await backend.get_item("k")
        value["items"].append(2)

        assert await backend.get_item("k") == {"items": [1]}

    @pytest.mark.asyncio
    async def test_stored_values_are_copies(self, backend):
        value = {"items": [1]}
        await backend.set_item("k", value)
        value["items"].append(2)

        assert await backend.get_item("k") == {"items": [1]}

    @pytest.mark.asyncio
    async def test_merge_json_object_strings(self, backend):
        await backend.set_item("k", json.dumps({"a": 1, "nested": {"x": 1}}))
        await backend.merge_item("k", json.dumps({"nested": {"y": 2}}))

        assert json.loads(await backend.get_item("k")) == {"a": 1, "nested": {"x": 1, "y": 2}}

    @pytest.mark.asyncio
    async def test_merge_non_json_string_replaces(self, backend):
        await backend.set_item("k", "plain")
        await backend.merge_item("k", "other")

        assert await backend.get_item("k") == "other"

    @pytest.mark.asyncio
    async def test_merge_into_missing_key(self, backend):
        await backend.merge_item("k", {"a": 1})
        assert await backend.get_item("k") == {"a": 1}

    @pytest.mark.asyncio
    async def test_len(self, backend):
        await backend.multi_set([("a", 1), ("b", 2)])
        assert len(backend) == 2

    def test_get_name(self, backend):
        assert backend.get_name() == "MemoryStorage"
