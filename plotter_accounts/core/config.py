"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Backend-specific fields are validated at load time.
"""

import logging
from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment and .env.

    All settings have defaults; validate_store checks the combination of
    store backend and connection fields.
    """

    # App
    app_name: str = "plotter-accounts"
    debug: bool = False
    log_level: str | None = None

    # Config store: "redis" (shared, multi-session) or "memory" (single process)
    store_backend: str = "redis"

    # Redis
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    redis_socket_timeout: float = 5.0

    # Prepended to every store key; isolates configurations sharing one store.
    config_key_prefix: str = ""

    # Credential derivation cost (bcrypt)
    bcrypt_rounds: int = 12

    # CLI: each command runs under this timeout (asyncio.wait_for)
    command_timeout_seconds: float = 30.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_store(self) -> "Settings":
        """Validate store backend and related fields."""
        if self.store_backend not in ("redis", "memory"):
            raise ValueError(
                f"store_backend must be 'redis' or 'memory', got: {self.store_backend!r}"
            )
        if self.store_backend == "redis" and not self.redis_host:
            raise ValueError(
                "REDIS_HOST is required when store_backend is 'redis'. "
                "Set in environment or .env file."
            )
        if self.command_timeout_seconds <= 0:
            raise ValueError("command_timeout_seconds must be positive")
        return self

    @model_validator(mode="after")
    def validate_log_level(self) -> "Settings":
        """Normalize log_level to an upper-case logging level name."""
        if self.log_level is None:
            return self
        level = self.log_level.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(
                f"log_level must be one of {sorted(logging.getLevelNamesMapping())}, "
                f"got: {self.log_level!r}"
            )
        self.log_level = level
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
