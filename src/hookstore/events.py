"""Minimal event emitter used by the engine for observer notifications."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


class EventEmitter:
    """Synchronous pub/sub keyed by event name.

    Listeners run in subscription order inside :meth:`emit`. A listener that
    returns an awaitable is scheduled on the running loop and not awaited.
    """

    def __init__(self) -> None:
        self._listeners: dict[Any, list[tuple[Listener, bool]]] = defaultdict(list)

    def on(self, event: Any, listener: Listener) -> "EventEmitter":
        self._listeners[event].append((listener, False))
        return self

    def once(self, event: Any, listener: Listener) -> "EventEmitter":
        self._listeners[event].append((listener, True))
        return self

    def off(self, event: Any, listener: Listener | None = None) -> "EventEmitter":
        """Remove *listener* from *event*, or every listener when omitted."""
        if listener is None:
            self._listeners.pop(event, None)
            return self

        self._listeners[event] = [
            (fn, once) for fn, once in self._listeners[event] if fn is not listener
        ]
        return self

    def listeners(self, event: Any) -> list[Listener]:
        return [fn for fn, _ in self._listeners.get(event, [])]

    def emit(self, event: Any, *args: Any) -> bool:
        """Call every listener of *event* with *args*.

        Returns:
            True if the event had listeners
        """
        registered = self._listeners.get(event)
        if not registered:
            return False

        # Drop once-listeners before calling so re-entrant emits skip them
        self._listeners[event] = [(fn, once) for fn, once in registered if not once]

        for listener, _ in registered:
            result = listener(*args)
            if inspect.isawaitable(result):
                task = asyncio.ensure_future(result)
                task.add_done_callback(_log_listener_failure)
        return True

    def remove_all_listeners(self) -> None:
        self._listeners.clear()


def _log_listener_failure(task: "asyncio.Future") -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.warning(f"Async event listener failed: {exc}")
