"""Operation proxy: pre-pipeline, one core call, post-pipeline.

Each call walks ``INIT -> PRE -> CORE -> POST -> DONE``. An exception at any
stage ends the call; effects of earlier stages are not rolled back.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from .exceptions import MissingValueError
from .operations import Operation
from .pipeline import multi, normalize, run
from .types import UNSET, Envelope

if TYPE_CHECKING:
    from .engine import StorageEngine

logger = logging.getLogger(__name__)


class OperationProxy:
    """Callable wrapping one core operation with the engine's hook pipelines.

    The proxy holds a reference to the operation's core function and the
    engine that owns the registries; the engine exposes it under the
    operation's own name.

    Calling it with the wrong argument shape (a list for a single-key
    operation, a scalar for a bulk one) raises :class:`TypeError`, like any
    Python function called with bad arguments. :class:`ConfigurationError`
    is reserved for how hooks, plugins and backends are set up.
    """

    def __init__(self, operation: Operation, engine: "StorageEngine"):
        self.operation = operation
        self.engine = engine
        self.__name__ = operation.name
        self.__qualname__ = f"StorageEngine.{operation.name}"

    @property
    def name(self) -> str:
        return self.operation.name

    def __repr__(self) -> str:
        return f"<OperationProxy {self.operation.name}>"

    def _check_shape(self, key: Any) -> bool:
        bulk = isinstance(key, (list, tuple))
        if self.operation.bulk and not bulk:
            raise TypeError(f"{self.name} expects a list of keys or [key, value] pairs")
        if bulk and not self.operation.bulk:
            raise TypeError(f"{self.name} expects a single key, got {type(key).__name__}")
        return bulk

    def _check_values(self, key: Any, value: Any, bulk: bool) -> None:
        if not self.operation.write:
            return
        if not bulk:
            if value is UNSET:
                raise MissingValueError(self.name, key)
            return
        for item in key:
            item_key, item_value = normalize(item)
            if item_value is UNSET:
                raise MissingValueError(self.name, item_key)

    async def __call__(self, key: Any = UNSET, value: Any = UNSET) -> Any:
        method = self.name
        bulk = self._check_shape(key)
        self._check_values(key, value, bulk)

        execute = multi if bulk else run
        data: Envelope = {"key": key, "value": value, "method": method}

        pre = await execute(self.engine.pre, data)
        logger.debug(f"{method}: pre pipeline done")

        outcome = await self.operation.core(self.engine.backend, pre)
        api = dict(pre)
        if isinstance(outcome, Mapping):
            api.update(outcome)
        api["method"] = method

        post = await execute(self.engine.post, api)
        logger.debug(f"{method}: post pipeline done")

        if not bulk:
            value = post.get("value", UNSET)
            return None if value is UNSET else value
        if method != "multi_get":
            return None
        return [[item.get("key"), item.get("value")] for item in post.get("value", [])]
