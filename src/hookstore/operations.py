"""The fixed set of storage operations and their core logic.

Each core function receives the backend and the envelope produced by the
pre-pipeline and returns a partial envelope (or None) that the proxy merges
before running the post-pipeline. Bulk cores receive the per-item envelopes
built by :func:`hookstore.pipeline.multi` in ``envelope["value"]``.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .exceptions import MissingValueError
from .types import UNSET, Envelope

if TYPE_CHECKING:
    from .backends.base import StorageBackend

CoreFn = Callable[["StorageBackend", Envelope], Awaitable["dict[str, Any] | None"]]


@dataclass(frozen=True)
class Operation:
    """Description of one proxied storage operation.

    Attributes:
        name: Public method name, also used as ``envelope["method"]``
        core: Coroutine doing the single backend call
        bulk: Takes a list of keys/pairs instead of a scalar key
        write: Rejects UNSET values before reaching the backend
    """
    name: str
    core: CoreFn
    bulk: bool = False
    write: bool = False


async def _get_item(backend: StorageBackend, envelope: Envelope):
    key, value = envelope.get("key"), envelope.get("value", UNSET)

    # A pre hook may already have resolved the value
    if value is UNSET:
        value = await backend.get_item(key)

    return {"key": key, "value": value}


async def _set_item(backend: StorageBackend, envelope: Envelope):
    key, value = envelope.get("key"), envelope.get("value", UNSET)
    if value is UNSET:
        raise MissingValueError(envelope["method"], key)

    await backend.set_item(key, value)
    return {"key": key, "value": value}


async def _remove_item(backend: StorageBackend, envelope: Envelope):
    key = envelope.get("key")
    await backend.remove_item(key)
    return {"key": key, "value": envelope.get("value", UNSET)}


async def _merge_item(backend: StorageBackend, envelope: Envelope):
    key, value = envelope.get("key"), envelope.get("value", UNSET)
    if value is not UNSET:
        await backend.merge_item(key, value)
    return {"key": key, "value": value}


async def _clear(backend: StorageBackend, envelope: Envelope):
    await backend.clear()


async def _get_all_keys(backend: StorageBackend, envelope: Envelope):
    return {"value": list(await backend.get_all_keys())}


async def _multi_get(backend: StorageBackend, envelope: Envelope):
    items = envelope.get("value") or []

    pending = [item["key"] for item in items if item.get("value", UNSET) is UNSET]
    fetched = {}
    if pending:
        fetched = {key: value for key, value in await backend.multi_get(pending)}

    pairs = []
    for item in items:
        value = item.get("value", UNSET)
        if value is UNSET:
            value = fetched.get(item["key"])
        pairs.append([item["key"], value])

    return {"value": pairs}


async def _multi_set(backend: StorageBackend, envelope: Envelope):
    items = envelope.get("value") or []
    for item in items:
        if item.get("value", UNSET) is UNSET:
            raise MissingValueError(envelope["method"], item.get("key"))

    await backend.multi_set([(item["key"], item["value"]) for item in items])


async def _multi_merge(backend: StorageBackend, envelope: Envelope):
    items = envelope.get("value") or []
    pairs = [
        (item["key"], item["value"])
        for item in items
        if item.get("value", UNSET) is not UNSET
    ]
    if pairs:
        await backend.multi_merge(pairs)


async def _multi_remove(backend: StorageBackend, envelope: Envelope):
    items = envelope.get("value") or []
    await backend.multi_remove([item["key"] for item in items])


async def _flush_get_requests(backend: StorageBackend, envelope: Envelope):
    await backend.flush_get_requests()


OPERATIONS: dict[str, Operation] = {
    op.name: op
    for op in (
        Operation("get_item", _get_item),
        Operation("set_item", _set_item, write=True),
        Operation("remove_item", _remove_item),
        Operation("merge_item", _merge_item),
        Operation("clear", _clear),
        Operation("get_all_keys", _get_all_keys),
        Operation("multi_get", _multi_get, bulk=True),
        Operation("multi_set", _multi_set, bulk=True, write=True),
        Operation("multi_merge", _multi_merge, bulk=True),
        Operation("multi_remove", _multi_remove, bulk=True),
        Operation("flush_get_requests", _flush_get_requests),
    )
}

OPERATION_NAMES: tuple[str, ...] = tuple(OPERATIONS)
