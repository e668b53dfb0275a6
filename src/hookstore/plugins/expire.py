"""Automatically expire keys after a configured duration.

Options:
    duration: Seconds a written value stays readable (required)

Writes wrap the value as ``{"ttl": <epoch seconds>, "value": ...}`` and
schedule a removal; reads unwrap it, turning expired values into ``None``.
On setup the plugin scans the keys it covers and reschedules (or removes)
values written by an earlier process.
"""

import asyncio
import json
import logging
import time

from hookstore.exceptions import ConfigurationError
from hookstore.types import UNSET

logger = logging.getLogger(__name__)

WRITE_METHODS = ("set_item", "multi_set", "merge_item", "multi_merge")
READ_METHODS = ("get_item", "multi_get")

# Wrap before serializers (default 100) see the value, unwrap after they ran
WRITE_ORDER = 200
READ_ORDER = 50


class Timers:
    """Named ``call_later`` handles; scheduling a name again replaces it."""

    def __init__(self):
        self._handles: dict[str, asyncio.TimerHandle] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._handles

    def __len__(self) -> int:
        return len(self._handles)

    def clear(self, name: str) -> "Timers":
        handle = self._handles.pop(name, None)
        if handle is not None:
            handle.cancel()
        return self

    def set_timeout(self, name: str, callback, delay: float) -> None:
        loop = asyncio.get_running_loop()

        def fire():
            self._handles.pop(name, None)
            callback()

        self._handles[name] = loop.call_later(max(delay, 0), fire)

    def destroy(self) -> None:
        for handle in self._handles.values():
            handle.cancel()
        self._handles.clear()


def wrap(value, expires_at: float) -> dict:
    return {"ttl": expires_at, "value": value}


def unwrap(stored):
    """Return ``(expires_at, value)`` for a wrapped value, else ``(None, stored)``."""
    if isinstance(stored, dict) and set(stored) == {"ttl", "value"}:
        return stored["ttl"], stored["value"]
    return None, stored


def _peek_ttl(raw):
    """Best-effort read of the expiry stored in a raw backend value."""
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return None
    expires_at, _ = unwrap(raw)
    return expires_at


def expire(ctx):
    """Expire keys matching the plugin pattern after ``duration`` seconds.

    Options are validated and hooks registered right away; the returned
    coroutine is the startup scan, which the engine runs in the background.
    """
    duration = ctx.options.get("duration")
    if not duration:
        raise ConfigurationError("the `duration` option must be set", component="expire")
    duration = float(duration)

    engine = ctx.engine
    timers = Timers()
    tasks: set[asyncio.Task] = set()

    async def _remove(key):
        try:
            await engine.remove_item(key)
            logger.debug(f"Expired key {key}")
        except Exception as e:
            logger.warning(f"Failed to remove expired key {key}: {e}")

    def schedule(key, delay: float):
        def fire():
            task = asyncio.ensure_future(_remove(key))
            tasks.add(task)
            task.add_done_callback(tasks.discard)

        timers.clear(key).set_timeout(key, fire, delay)

    def on_write(envelope, options):
        if envelope.get("value", UNSET) is UNSET:
            return None
        key = envelope.get("key")
        schedule(key, duration)
        return {"value": wrap(envelope["value"], time.time() + duration)}

    def on_read(envelope, options):
        expires_at, value = unwrap(envelope.get("value"))
        if expires_at is None:
            return None
        if expires_at <= time.time():
            return {"value": None}
        return {"value": value}

    ctx.before({method: on_write for method in WRITE_METHODS}, {"order": WRITE_ORDER})
    ctx.after({method: on_read for method in READ_METHODS}, {"order": READ_ORDER})

    def destroy_expire():
        timers.destroy()
        for task in list(tasks):
            task.cancel()

    ctx.destroy(destroy_expire)

    return _startup_scan(ctx, schedule)


async def _startup_scan(ctx, schedule):
    """Reschedule or remove values written by an earlier run.

    Failures are per key and never stop the scan.
    """
    engine = ctx.engine
    try:
        keys = await engine.api("get_all_keys")
    except Exception as e:
        logger.warning(f"Expire startup scan could not list keys: {e}")
        return

    for key in keys:
        if not ctx.enabled(key):
            continue

        try:
            raw = await engine.api("get_item", key)
        except Exception as e:
            logger.debug(f"Expire startup scan skipped {key}: {e}")
            continue

        expires_at = _peek_ttl(raw)
        if expires_at is None:
            continue

        time_left = expires_at - time.time()
        if time_left > 0:
            schedule(key, time_left)
            continue

        try:
            await engine.api("remove_item", key)
        except Exception as e:
            logger.debug(f"Expire startup scan could not remove {key}: {e}")
