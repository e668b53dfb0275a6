"""Exceptions raised by hookstore.

Exceptions raised by hook handlers are never wrapped: they propagate to the
caller of the proxied operation unchanged.
"""


class HookstoreError(Exception):
    """Base class for all hookstore errors."""


class ConfigurationError(HookstoreError):
    """Raised when a plugin, hook or backend is configured incorrectly."""

    def __init__(self, message: str, component: str | None = None):
        self.component = component
        if component:
            message = f"{component}: {message}"
        super().__init__(message)


class MissingValueError(HookstoreError, ValueError):
    """Raised when a write operation receives no value to store."""

    def __init__(self, method: str, key):
        self.method = method
        self.key = key
        super().__init__(f"Unable to store unset value for key({key}) in {method}")
