"""Storage backends - the key-value capability the engine wraps

Backends are discovered via the ``hookstore.backends`` entry point group and
selected with ``Settings.storage_backend``.

Usage:
    from hookstore.backends import create_backend
    backend = create_backend(settings)
"""

import logging

from hookstore import loader
from hookstore.config import Settings
from hookstore.exceptions import ConfigurationError

from .base import StorageBackend
from .memory import MemoryStorage

logger = logging.getLogger(__name__)


def create_backend(settings: Settings) -> StorageBackend:
    """Create the storage backend named by ``settings.storage_backend``

    Raises:
        ConfigurationError: If the backend is unknown or its dependencies
            are missing
    """
    name = settings.storage_backend
    backend_class = loader.get_component('backends', name)

    if backend_class is None and name == "memory":
        backend_class = MemoryStorage

    if backend_class is None:
        available = ', '.join(loader.get_available('backends'))
        raise ConfigurationError(
            f"Unknown storage backend: {name}. "
            f"Available: {available or 'none (check dependencies)'}"
        )

    logger.info(f"Creating storage backend: {name}")
    return backend_class(settings)


__all__ = [
    'StorageBackend',
    'MemoryStorage',
    'create_backend',
]
