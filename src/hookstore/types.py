"""Shared type definitions for hookstore envelopes and hooks."""
from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Union


class _Unset:
    """Marker for an argument that was never supplied.

    ``None`` is a storable value, so absence needs its own sentinel.
    """

    _instance: "_Unset | None" = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "_Unset":
        return self

    def __deepcopy__(self, memo: dict) -> "_Unset":
        return self


UNSET: Any = _Unset()

# {method, key, value, ...hook-added fields}
Envelope = dict[str, Any]

HookResult = Union[Mapping[str, Any], None]

Modifier = Callable[[Envelope, dict[str, Any]], Union[HookResult, Awaitable[HookResult]]]

Modifiers = Union[Modifier, Mapping[str, Modifier]]

CleanupFn = Callable[[], Any]
