"""Configuration management for hookstore"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for the storage engine, its backends and built-in plugins.

    Every field can be set through the environment with a ``HOOKSTORE_``
    prefix, e.g. ``HOOKSTORE_STORAGE_BACKEND=redis``.

    Backend Selection:
        Backend names map to entry points in the ``hookstore.backends`` group.
        Core provides ``memory`` and ``redis`` (the latter needs the
        ``redis`` extra installed).
    """

    model_config = SettingsConfigDict(
        env_prefix="HOOKSTORE_",
        env_file=".env",
        extra="ignore",
    )

    # ===== Backend Selection =====
    storage_backend: str = Field(
        default="memory",
        description="Storage backend name (discovered via hookstore.backends entry points)"
    )

    # ===== Redis Configuration =====
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: str | None = None
    redis_prefix: str = "hookstore:"

    # ===== Hooks =====
    default_order: int = 100  # Higher runs earlier

    # ===== Encrypt Plugin =====
    encrypt_secret: str | None = None
    encrypt_algorithm: str = "fernet"
    encrypt_iterations: int = 100_000

    # ===== Expire Plugin =====
    expire_duration: float | None = None  # Seconds

    # ===== Logging =====
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    def plugin_options(self, name: str) -> dict:
        """Default options for a built-in plugin, taken from settings.

        Unset values are left out so plugins can report what is missing.
        """
        if name == "encrypt":
            options = {
                "secret": self.encrypt_secret,
                "algorithm": self.encrypt_algorithm,
                "iterations": self.encrypt_iterations,
            }
        elif name == "expire":
            options = {"duration": self.expire_duration}
        else:
            options = {}
        return {key: value for key, value in options.items() if value is not None}


settings = Settings()
