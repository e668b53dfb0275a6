"""Contract test base classes for hookstore backends.

These abstract test classes define the behavioral contract that every
storage backend must satisfy. Backend packages subclass them and implement
the backend fixture.

Usage in a backend package:
    from hookstore.testing import StorageBackendContractTest

    class TestMyBackendContract(StorageBackendContractTest):
        @pytest.fixture
        def backend(self):
            return MyBackend(test_settings)
"""

from .storage import StorageBackendContractTest

__all__ = [
    'StorageBackendContractTest',
]
