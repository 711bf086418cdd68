"""
Toolkit configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file).

The process-wide secret is read from SECRET_KEY; AUTH_KEY is accepted as an
alias so deployments migrating from the WordPress-style constant keep
working. When neither is set, a random per-process secret is generated:
bound tokens and nonces then stop verifying across restarts, which is
acceptable in development only.
"""

from __future__ import annotations

import secrets
from functools import lru_cache
from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CounterSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Optional; without Redis or MongoDB the in-memory store is used
    redis_uri: Optional[str] = None
    mongodb_uri: Optional[str] = None
    db_name: str = "idkit"
    counter_collection: str = "sequences"
    counter_key_prefix: str = "idkit_seq_"
    sequence_start: int = 1000


class TokenSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    nonce_lifetime_seconds: int = 86400
    magic_token_ttl_seconds: int = 86400


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production

    # Sampling rate (0.0–1.0) for per-call generation events
    sample_rate_generation: float = 0.01


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    secret_key: str = ""
    auth_key: str = ""  # alias for secret_key
    env: str = "development"

    secret_key_generated: bool = False

    counter: Optional[CounterSettings] = None
    tokens: Optional[TokenSettings] = None
    logging: Optional[LoggingSettings] = None

    @model_validator(mode="after")
    def _populate_sub_configs_and_secret(self) -> "AppSettings":
        if not self.secret_key and self.auth_key:
            self.secret_key = self.auth_key
        if not self.secret_key:
            self.secret_key = secrets.token_hex(32)
            self.secret_key_generated = True

        if self.counter is None:
            self.counter = CounterSettings()
        if self.tokens is None:
            self.tokens = TokenSettings()
        if self.logging is None:
            self.logging = LoggingSettings()

        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return the cached process-wide settings instance."""
    return AppSettings()
