"""Entry point discovery for hookstore plugins and storage backends

Both built-in components (declared in hookstore's own pyproject.toml) and
third-party ones are discovered through the same mechanism.

Entry Point Groups:
    - hookstore.plugins: Plugin factories accepted by ``StorageEngine.use``
    - hookstore.backends: StorageBackend classes built from Settings

External packages add components by declaring entry points:
    [project.entry-points."hookstore.plugins"]
    audit = "my_package.audit:audit_plugin"

Usage:
    # Get all components of a kind
    plugins = get_components('plugins')  # {'json': json_codec, ...}

    # Get a specific one
    factory = get_component('plugins', 'json')
"""

import importlib.metadata
import logging
from typing import Any

logger = logging.getLogger(__name__)

# Entry point groups for each component kind
COMPONENT_GROUPS = {
    'plugins': 'hookstore.plugins',
    'backends': 'hookstore.backends',
}

# Cache for loaded components: {kind: {name: object}}
_component_cache: dict[str, dict[str, Any]] = {}


def discover_components(group: str) -> dict[str, Any]:
    """Discover components for a specific entry point group

    Args:
        group: Entry point group name (e.g., 'hookstore.plugins')

    Returns:
        Dictionary mapping component names to loaded objects

    Note:
        Components with missing dependencies are skipped, so the redis
        backend simply does not show up when redis is not installed.
    """
    components = {}

    try:
        eps = importlib.metadata.entry_points(group=group)
    except Exception as e:
        logger.warning(f"Failed to discover components for {group}: {e}")
        return components

    for ep in eps:
        try:
            components[ep.name] = ep.load()
            logger.debug(f"Discovered component: {group}.{ep.name}")
        except ImportError as e:
            # Missing optional dependency - this is expected and normal
            logger.debug(f"Skipping {group}.{ep.name}: missing dependency - {e}")
        except Exception as e:
            logger.warning(f"Failed to load component {group}.{ep.name}: {e}")

    return components


def get_components(kind: str) -> dict[str, Any]:
    """Get all discovered components of a kind ('plugins' or 'backends')"""
    if not _component_cache.get(kind):
        group = COMPONENT_GROUPS.get(kind)
        if group:
            discovered = discover_components(group)
            # Manually registered components take precedence
            discovered.update(_component_cache.get(kind, {}))
            _component_cache[kind] = discovered
        else:
            logger.warning(f"Unknown component kind: {kind}")
            _component_cache[kind] = {}

    return _component_cache[kind]


def get_component(kind: str, name: str) -> Any | None:
    """Get a specific component, or None if not found"""
    return get_components(kind).get(name)


def get_available(kind: str) -> list[str]:
    """Get list of available component names for a kind"""
    return sorted(get_components(kind))


def register_component(kind: str, name: str, component: Any) -> None:
    """Manually register a component

    For testing and runtime registration. Components registered this way
    take precedence over entry point discovered ones.

    Example:
        >>> register_component('plugins', 'audit', audit_plugin)
    """
    get_components(kind)[name] = component
    logger.debug(f"Manually registered component: {kind}.{name}")


def reset() -> None:
    """Reset loader cache

    For testing purposes only. Clears all cached components so they will be
    rediscovered on next access.
    """
    _component_cache.clear()
    logger.debug("Component loader cache reset")
