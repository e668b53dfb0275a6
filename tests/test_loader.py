"""Tests for the entry point based component loader"""

from unittest.mock import MagicMock, patch

from hookstore import loader


class TestLoaderDiscovery:
    """Test component discovery via entry points"""

    def setup_method(self):
        """Reset loader state before each test"""
        loader.reset()

    def teardown_method(self):
        """Clean up after each test"""
        loader.reset()

    def test_discover_components_returns_dict(self):
        """Should return dictionary even when no components found"""
        components = loader.discover_components('hookstore.nonexistent')
        assert components == {}

    def test_get_component_returns_none_for_unknown(self):
        assert loader.get_component('plugins', 'nonexistent_plugin') is None

    def test_get_available_returns_sorted_list(self):
        loader.register_component('plugins', 'zeta', object())
        loader.register_component('plugins', 'alpha', object())

        available = loader.get_available('plugins')
        assert available == sorted(available)
        assert {'alpha', 'zeta'} <= set(available)

    def test_unknown_kind(self):
        assert loader.get_components('widgets') == {}

    def test_register_component(self):
        marker = object()
        loader.register_component('plugins', 'custom', marker)

        assert loader.get_component('plugins', 'custom') is marker

    def test_reset_clears_cache(self):
        loader.register_component('plugins', 'custom', object())
        assert 'plugins' in loader._component_cache

        loader.reset()
        assert 'plugins' not in loader._component_cache

    @patch('importlib.metadata.entry_points')
    def test_loads_entry_points(self, mock_eps):
        marker = object()
        mock_ep = MagicMock()
        mock_ep.name = 'custom'
        mock_ep.load.return_value = marker
        mock_eps.return_value = [mock_ep]

        assert loader.discover_components('hookstore.plugins') == {'custom': marker}
        mock_eps.assert_called_once_with(group='hookstore.plugins')

    @patch('importlib.metadata.entry_points')
    def test_handles_import_error_gracefully(self, mock_eps):
        """Should skip components with missing dependencies"""
        mock_ep = MagicMock()
        mock_ep.name = 'broken'
        mock_ep.load.side_effect = ImportError("Missing dependency")
        mock_eps.return_value = [mock_ep]

        assert 'broken' not in loader.discover_components('hookstore.backends')

    @patch('importlib.metadata.entry_points')
    def test_handles_load_exception_gracefully(self, mock_eps):
        """Should handle unexpected exceptions during load"""
        mock_ep = MagicMock()
        mock_ep.name = 'error'
        mock_ep.load.side_effect = RuntimeError("Unexpected error")
        mock_eps.return_value = [mock_ep]

        assert 'error' not in loader.discover_components('hookstore.plugins')

    @patch('importlib.metadata.entry_points')
    def test_registered_components_survive_rediscovery(self, mock_eps):
        mock_eps.return_value = []
        marker = object()
        loader.register_component('plugins', 'manual', marker)

        assert loader.get_component('plugins', 'manual') is marker
