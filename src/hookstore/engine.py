"""The storage engine: hook registries, proxied operations and plugins.

Typical usage::

    engine = create_engine()
    engine.use("*", "json")
    engine.use("secret:*", "encrypt", {"secret": "s3cr3t", "algorithm": "fernet"})

    await engine.set_item("secret:token", {"value": 1})
    await engine.get_item("secret:token")   # {"value": 1}

Every public operation runs ``pre hooks -> backend -> post hooks``;
:meth:`StorageEngine.api` reaches the backend directly, without hooks.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any

from . import loader
from .backends import StorageBackend, create_backend
from .config import Settings
from .events import EventEmitter
from .exceptions import ConfigurationError
from .hooks import HookRegistry
from .matching import matches
from .operations import OPERATIONS
from .pipeline import register
from .plugins import BUILTIN_PLUGINS
from .proxy import OperationProxy
from .types import UNSET, CleanupFn, Modifiers

logger = logging.getLogger(__name__)


@dataclass
class PluginContext:
    """Everything a plugin factory needs, scoped to one ``use`` call.

    ``before`` and ``after`` are pre-bound to :attr:`pattern`, so a plugin
    only ever hooks the keys it was installed for.
    """
    engine: "StorageEngine"
    pattern: str
    options: dict[str, Any] = field(default_factory=dict)

    def before(self, modifiers: Modifiers, options: dict[str, Any] | None = None) -> "StorageEngine":
        return self.engine.before(self.pattern, modifiers, options)

    def after(self, modifiers: Modifiers, options: dict[str, Any] | None = None) -> "StorageEngine":
        return self.engine.after(self.pattern, modifiers, options)

    def enabled(self, key) -> bool:
        """Check if *key* is selected by this plugin's pattern."""
        return matches(key, self.pattern)

    def destroy(self, fn: CleanupFn) -> None:
        """Register a clean up function to call when the engine is destroyed."""
        self.engine._cleanup.append(fn)


class StorageEngine(EventEmitter):
    """Key-value storage with pattern-scoped pre/post hooks.

    Attributes:
        backend: Storage backend every operation ends up calling
        pre: Registry of hooks run before the backend call
        post: Registry of hooks run after the backend call
    """

    def __init__(self, backend: StorageBackend | None = None, settings: Settings | None = None):
        super().__init__()
        self.settings = settings or Settings()
        self.backend = backend if backend is not None else create_backend(self.settings)

        self.pre = HookRegistry("pre")
        self.post = HookRegistry("post")
        self._cleanup: list[CleanupFn] = []
        self._pending: list[asyncio.Future] = []

        self._proxies: dict[str, OperationProxy] = {
            name: OperationProxy(operation, self) for name, operation in OPERATIONS.items()
        }

    def proxy(self, method: str) -> OperationProxy:
        try:
            return self._proxies[method]
        except KeyError:
            raise ConfigurationError(f"Unknown operation: {method}") from None

    # ------------------------------------------------------------------
    # Proxied operations
    # ------------------------------------------------------------------

    async def get_item(self, key: str) -> Any:
        return await self._proxies["get_item"](key)

    async def set_item(self, key: str, value: Any = UNSET) -> Any:
        return await self._proxies["set_item"](key, value)

    async def remove_item(self, key: str) -> Any:
        return await self._proxies["remove_item"](key)

    async def merge_item(self, key: str, value: Any = UNSET) -> Any:
        return await self._proxies["merge_item"](key, value)

    async def clear(self) -> None:
        return await self._proxies["clear"]()

    async def get_all_keys(self) -> list[str]:
        return await self._proxies["get_all_keys"]()

    async def multi_get(self, keys: list) -> list[list[Any]]:
        return await self._proxies["multi_get"](keys)

    async def multi_set(self, pairs: list) -> None:
        return await self._proxies["multi_set"](pairs)

    async def multi_merge(self, pairs: list) -> None:
        return await self._proxies["multi_merge"](pairs)

    async def multi_remove(self, keys: list) -> None:
        return await self._proxies["multi_remove"](keys)

    async def flush_get_requests(self) -> None:
        return await self._proxies["flush_get_requests"]()

    # ------------------------------------------------------------------
    # Direct access
    # ------------------------------------------------------------------

    async def api(self, method: str, *args: Any) -> Any:
        """Call a backend operation without running any hooks.

        Plugins use this for reads and writes that must see the stored
        representation, e.g. startup scans.
        """
        if method not in OPERATIONS:
            raise ConfigurationError(f"Unknown operation: {method}")
        return await getattr(self.backend, method)(*args)

    # ------------------------------------------------------------------
    # Hooks and plugins
    # ------------------------------------------------------------------

    def before(self, pattern: str, modifiers: Modifiers, options: dict[str, Any] | None = None) -> "StorageEngine":
        """Register modifiers that run before the backend call.

        Pre hooks can rewrite the key or value, or resolve a read entirely by
        returning ``{"value": ...}``.
        """
        return register(
            self.pre,
            pattern=pattern,
            modifiers=modifiers,
            context=self,
            options=options,
            default_order=self.settings.default_order,
        )

    def after(self, pattern: str, modifiers: Modifiers, options: dict[str, Any] | None = None) -> "StorageEngine":
        """Register modifiers that run on the backend's result."""
        return register(
            self.post,
            pattern=pattern,
            modifiers=modifiers,
            context=self,
            options=options,
            default_order=self.settings.default_order,
        )

    def use(self, pattern: str, plugin, options: dict[str, Any] | None = None) -> "StorageEngine":
        """Install a plugin for the keys matching *pattern*.

        Args:
            pattern: Key pattern the plugin's hooks trigger on
            plugin: Plugin factory, or the name of one registered in the
                ``hookstore.plugins`` entry point group
            options: Plugin options

        The factory is called but never awaited. When it returns an awaitable
        (asynchronous setup) the work is scheduled on the running loop and can
        be waited for with :meth:`ready`.

        Raises:
            ConfigurationError: If the plugin is unknown or rejects its options
        """
        options = dict(options or {})
        name = plugin if isinstance(plugin, str) else getattr(plugin, "__name__", repr(plugin))

        if isinstance(plugin, str):
            factory = loader.get_component("plugins", plugin) or BUILTIN_PLUGINS.get(plugin)
            if factory is None:
                available = ", ".join(sorted({*loader.get_available("plugins"), *BUILTIN_PLUGINS}))
                raise ConfigurationError(
                    f"Unknown plugin: {plugin}. Available: {available or 'none'}"
                )
            options = {**self.settings.plugin_options(plugin), **options}
        elif callable(plugin):
            factory = plugin
        else:
            raise ConfigurationError(f"Plugin must be callable or a plugin name, got {plugin!r}")

        context = PluginContext(engine=self, pattern=pattern, options=options)
        pre, post, cleanup = self.pre.snapshot(), self.post.snapshot(), len(self._cleanup)

        try:
            result = factory(context)
            if inspect.isawaitable(result):
                self._track_setup(name, result)
        except Exception:
            # A failed use leaves no hooks or clean up functions behind
            self.pre.restore(pre)
            self.post.restore(post)
            del self._cleanup[cleanup:]
            raise

        logger.debug(f"Using plugin {name} for pattern {pattern!r}")
        return self

    def _track_setup(self, name: str, setup) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            if inspect.iscoroutine(setup):
                setup.close()
            raise ConfigurationError(
                "asynchronous setup needs a running event loop", component=name
            ) from None

        task = asyncio.ensure_future(setup)

        def _settle(done: asyncio.Future) -> None:
            if done.cancelled():
                self._discard_pending(done)
                return
            exc = done.exception()
            if exc is None:
                self._discard_pending(done)
                return
            # Failed setups stay pending so ready() can raise them
            logger.error(f"Setup of plugin {name} failed: {exc}")

        task.add_done_callback(_settle)
        self._pending.append(task)

    def _discard_pending(self, task: asyncio.Future) -> None:
        if task in self._pending:
            self._pending.remove(task)

    async def ready(self) -> None:
        """Wait until every plugin's asynchronous setup has finished.

        Raises:
            Exception: The first setup failure, if any. A failure is raised
                by one ``ready()`` call only.
        """
        pending = list(self._pending)
        if not pending:
            return
        try:
            await asyncio.gather(*pending)
        finally:
            for task in pending:
                if task.done():
                    self._discard_pending(task)

    async def destroy(self) -> list[Any]:
        """Remove every hook and run the plugins' clean up functions.

        Unfinished plugin setups are cancelled. Registries are cleared before
        the clean up functions run; they run concurrently and are all awaited
        before the first failure, if any, is raised.

        Returns:
            Whatever the clean up functions returned
        """
        cleanup = list(self._cleanup)
        self._cleanup.clear()
        for task in self._pending:
            if not task.done():
                task.cancel()
        self._pending.clear()
        self.pre.clear()
        self.post.clear()

        logger.info(f"Destroying storage engine, running {len(cleanup)} clean up functions")

        results = await asyncio.gather(
            *(_call_cleanup(fn) for fn in cleanup), return_exceptions=True
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return results


async def _call_cleanup(fn: CleanupFn) -> Any:
    result = fn()
    if inspect.isawaitable(result):
        result = await result
    return result


def create_engine(settings: Settings | None = None, backend: StorageBackend | None = None) -> StorageEngine:
    """Create a storage engine with the configured backend.

    The embedding application owns the returned instance; hookstore keeps no
    default engine of its own.
    """
    settings = settings or Settings()
    return StorageEngine(backend=backend, settings=settings)
