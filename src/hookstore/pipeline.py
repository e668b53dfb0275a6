"""Hook registration and pipeline execution.

Three functions make up the executor:

* :func:`register` -- adds modifiers for one pattern to a registry.
* :func:`run` -- folds every applicable modifier over a single envelope.
* :func:`multi` -- normalizes bulk operations into one :func:`run` per item.

Modifiers run strictly one after another in descending ``order`` because each
one may depend on what the previous one returned. Exceptions raised by a
modifier abort the pipeline and propagate to the caller untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .exceptions import ConfigurationError
from .hooks import DEFAULT_ORDER, HookEntry, HookRegistry
from .operations import OPERATION_NAMES
from .types import UNSET, Envelope, Modifiers

logger = logging.getLogger(__name__)


def register(
    registry: HookRegistry,
    *,
    pattern: str,
    modifiers: Modifiers,
    context: Any = None,
    options: dict[str, Any] | None = None,
    default_order: int = DEFAULT_ORDER,
) -> Any:
    """Register modifiers for the keys selected by *pattern*.

    Args:
        registry: Registry (pre or post) that receives the entries
        pattern: Key pattern the modifiers should trigger on
        modifiers: Either one callable used for every operation, or a
            mapping of operation name to callable
        context: Owner of the hooks; returned for chaining
        options: Passed to each modifier call; ``order`` sets priority

    Returns:
        The *context* argument

    Raises:
        ConfigurationError: If a mapping names an unknown operation or a
            modifier is not callable
    """
    options = dict(options or {})
    order = options.get("order", default_order)

    if callable(modifiers):
        modifiers = {method: modifiers for method in OPERATION_NAMES}
    elif not isinstance(modifiers, Mapping):
        raise ConfigurationError(
            f"Modifiers must be a callable or a mapping, got {type(modifiers).__name__}"
        )

    unknown = [method for method in modifiers if method not in OPERATION_NAMES]
    if unknown:
        raise ConfigurationError(
            f"Unknown operation(s) {', '.join(sorted(unknown))}. "
            f"Available: {', '.join(OPERATION_NAMES)}"
        )

    for method, modifier in modifiers.items():
        if not callable(modifier):
            raise ConfigurationError(f"Modifier for {method} is not callable")
        registry.add(
            method,
            HookEntry(
                pattern=pattern,
                order=order,
                modifier=modifier,
                context=context,
                options=options,
            ),
        )

    return context


async def run(registry: HookRegistry, envelope: Envelope) -> Envelope:
    """Run the modifiers registered for ``envelope["method"]``.

    Returns:
        A new envelope with every modifier's partial result merged in
    """
    method = envelope["method"]
    hooks = registry.hooks_for(method)

    result = envelope
    for hook in hooks:
        if not hook.applies_to(result.get("key")):
            continue

        changed = await hook.invoke(dict(result))
        if not changed:
            continue
        if not isinstance(changed, Mapping):
            raise TypeError(
                f"{registry.direction} hook for {method} returned "
                f"{type(changed).__name__}, expected a mapping or None"
            )

        result = {**result, **changed, "method": method}

    return result


def normalize(item) -> tuple[Any, Any]:
    """Turn a bulk element into a ``(key, value)`` pair.

    Accepts a bare key, a ``[key, value]`` pair or a ``{"key", "value"}``
    mapping. Bare keys get an UNSET value.
    """
    if isinstance(item, Mapping):
        return item.get("key"), item.get("value", UNSET)
    if isinstance(item, (list, tuple)):
        if not item:
            raise TypeError("Bulk element must not be an empty pair")
        return item[0], item[1] if len(item) > 1 else UNSET
    return item, UNSET


async def multi(registry: HookRegistry, envelope: Envelope) -> Envelope:
    """Run the pipeline for each element of a bulk operation.

    The dataset is the envelope's ``value`` when it is a list, otherwise its
    ``key``. Items are processed sequentially and in order; plugins may
    schedule work per item.

    Returns:
        ``{"method": ..., "value": [item_envelope, ...]}``
    """
    method = envelope["method"]
    value = envelope.get("value", UNSET)
    dataset = value if isinstance(value, (list, tuple)) else envelope.get("key")
    if dataset is None or dataset is UNSET:
        dataset = []

    results = []
    for item in dataset:
        key, item_value = normalize(item)
        results.append(await run(registry, {"method": method, "key": key, "value": item_value}))

    return {"method": method, "value": results}
