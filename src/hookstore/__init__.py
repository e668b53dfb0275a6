"""hookstore - pattern-scoped hooks and plugins around an async key-value store.

Usage:
    from hookstore import create_engine

    engine = create_engine()
    engine.use("*", "json")
    await engine.set_item("user:1", {"name": "Ada"})
"""

from .config import Settings
from .engine import PluginContext, StorageEngine, create_engine
from .exceptions import ConfigurationError, HookstoreError, MissingValueError
from .hooks import DEFAULT_ORDER, HookEntry, HookRegistry
from .matching import matches
from .operations import OPERATION_NAMES
from .pipeline import multi, register, run
from .types import UNSET

__version__ = "0.1.0"

__all__ = [
    # Engine
    "StorageEngine",
    "PluginContext",
    "create_engine",
    "Settings",
    # Pipeline
    "HookEntry",
    "HookRegistry",
    "DEFAULT_ORDER",
    "OPERATION_NAMES",
    "matches",
    "register",
    "run",
    "multi",
    "UNSET",
    # Errors
    "HookstoreError",
    "ConfigurationError",
    "MissingValueError",
]
