"""Pytest fixtures and configuration for hookstore tests"""

import os

import pytest

# Keep developer .env files and environment from leaking into Settings
for _key in list(os.environ):
    if _key.startswith("HOOKSTORE_"):
        del os.environ[_key]

from hookstore import loader  # noqa: E402
from hookstore.backends.memory import MemoryStorage  # noqa: E402
from hookstore.config import Settings  # noqa: E402
from hookstore.engine import StorageEngine  # noqa: E402


@pytest.fixture
def settings():
    """Settings with defaults only"""
    return Settings(_env_file=None)


@pytest.fixture
def backend():
    """Empty in-memory backend"""
    return MemoryStorage()


@pytest.fixture
def engine(backend, settings):
    """Engine without any hooks over an in-memory backend"""
    return StorageEngine(backend=backend, settings=settings)


@pytest.fixture
def reset_loader():
    """Clear the component cache before and after a test"""
    loader.reset()
    yield
    loader.reset()
