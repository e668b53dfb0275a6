"""Key pattern matching used to scope hooks.

A pattern is one or more sub-patterns separated by commas or whitespace.
``*`` matches any run of characters and a leading ``-`` turns a sub-pattern
into an exclusion::

    matches("user:1", "*")                  # True
    matches("user:1", "user:*")             # True
    matches("user:1", "user:*,-user:1")     # False
"""

import re
from functools import lru_cache

from .types import UNSET

WILDCARD = "*"

_SPLIT = re.compile(r"[\s,]+")


@lru_cache(maxsize=256)
def _compile(pattern: str) -> tuple[tuple[re.Pattern, ...], tuple[re.Pattern, ...]]:
    include: list[re.Pattern] = []
    exclude: list[re.Pattern] = []

    for part in _SPLIT.split(pattern):
        if not part:
            continue
        target = include
        if part.startswith("-"):
            target = exclude
            part = part[1:]
        regex = ".*".join(re.escape(chunk) for chunk in part.split(WILDCARD))
        target.append(re.compile(f"^{regex}$", re.DOTALL))

    return tuple(include), tuple(exclude)


def matches(key, pattern: str) -> bool:
    """Check whether *key* is selected by *pattern*.

    Never raises. A missing (``None`` or UNSET) key is matched as the empty
    string so only wildcard patterns apply to keyless operations like
    ``clear``.
    """
    if pattern is None:
        return False

    subject = "" if key is None or key is UNSET else str(key)
    if pattern == WILDCARD or pattern == subject:
        return True

    include, exclude = _compile(str(pattern))
    if any(rx.match(subject) for rx in exclude):
        return False
    return any(rx.match(subject) for rx in include)
