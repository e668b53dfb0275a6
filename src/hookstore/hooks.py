"""Hook entries and the per-direction registry that orders them."""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass, field
from typing import Any

from .matching import matches
from .types import Envelope, HookResult, Modifier

logger = logging.getLogger(__name__)

DEFAULT_ORDER = 100


@dataclass(frozen=True)
class HookEntry:
    """A pattern-scoped modifier registered for one operation.

    Attributes:
        pattern: Key pattern the entry applies to
        order: Higher values run earlier (default 100)
        modifier: Callable invoked as ``modifier(envelope, options)``
        context: Object that registered the hook (engine or plugin owner)
        options: Options handed to the modifier on every call
    """
    pattern: str
    order: int
    modifier: Modifier
    context: Any = None
    options: dict[str, Any] = field(default_factory=dict)

    def applies_to(self, key) -> bool:
        return matches(key, self.pattern)

    async def invoke(self, envelope: Envelope) -> HookResult:
        """Call the modifier, awaiting it when it is asynchronous."""
        result = self.modifier(envelope, self.options)
        if inspect.isawaitable(result):
            result = await result
        return result


class HookRegistry:
    """Maps operation names to hook entries sorted by descending order.

    Registration replaces the stored tuple instead of mutating it, so a
    pipeline that already took :meth:`hooks_for` keeps iterating over a
    consistent snapshot while new hooks are added.
    """

    def __init__(self, direction: str = "pre"):
        self.direction = direction
        self._hooks: dict[str, tuple[HookEntry, ...]] = {}

    def add(self, method: str, entry: HookEntry) -> None:
        previous = self._hooks.get(method, ())
        # sorted() is stable, so equal orders keep registration order
        self._hooks[method] = tuple(
            sorted(previous + (entry,), key=lambda hook: hook.order, reverse=True)
        )
        logger.debug(
            f"Registered {self.direction} hook for {method} "
            f"(pattern={entry.pattern!r}, order={entry.order})"
        )

    def hooks_for(self, method: str) -> tuple[HookEntry, ...]:
        return self._hooks.get(method, ())

    def methods(self) -> list[str]:
        return [method for method, hooks in self._hooks.items() if hooks]

    def clear(self) -> None:
        self._hooks = {}

    def snapshot(self) -> dict[str, tuple[HookEntry, ...]]:
        return dict(self._hooks)

    def restore(self, snapshot: dict[str, tuple[HookEntry, ...]]) -> None:
        """Drop every hook registered since *snapshot* was taken."""
        self._hooks = dict(snapshot)

    def __len__(self) -> int:
        return sum(len(hooks) for hooks in self._hooks.values())

    def __contains__(self, method: str) -> bool:
        return bool(self._hooks.get(method))
