"""In-memory storage backend - process-local dict store"""

import copy
import json
import logging
from typing import Any

from hookstore.config import Settings

from .base import StorageBackend, deep_merge

logger = logging.getLogger(__name__)


class MemoryStorage(StorageBackend):
    """Dictionary-backed backend.

    Values are stored as given so ``False``, ``''`` and ``None`` keep their
    type. Stored mappings are deep-copied on the way in and out so callers
    cannot mutate the store through a returned reference.
    """

    def __init__(self, settings: Settings | None = None):
        self._data: dict[str, Any] = {}

    async def get_item(self, key: str) -> Any:
        return copy.deepcopy(self._data.get(key))

    async def set_item(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    async def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    async def merge_item(self, key: str, value: Any) -> None:
        current = self._data.get(key)

        # JSON object strings are merged as objects
        if isinstance(current, str) and isinstance(value, str):
            try:
                decoded_current = json.loads(current)
                decoded_value = json.loads(value)
            except ValueError:
                self._data[key] = value
                return
            if isinstance(decoded_current, dict) and isinstance(decoded_value, dict):
                self._data[key] = json.dumps(deep_merge(decoded_current, decoded_value))
            else:
                self._data[key] = value
            return

        self._data[key] = copy.deepcopy(deep_merge(current, value))

    async def clear(self) -> None:
        count = len(self._data)
        self._data.clear()
        logger.debug(f"Cleared {count} keys from memory storage")

    async def get_all_keys(self) -> list[str]:
        return list(self._data)

    def __len__(self) -> int:
        return len(self._data)
