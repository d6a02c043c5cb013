"""
xmpp_auth.settings

Process-level configuration model (Pydantic Settings).

Responsibilities:
- Provide env-driven ambient settings (environment, logging, store pooling).
- Hide secrets from repr/logging (store URL override may embed a password).
- Offer a cached settings instance for the plugin lifecycle.

The plugin's own configuration document (mechanisms, store connection fields)
lives in `xmpp_auth.config`; these settings only cover how the process runs.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="XMPP_AUTH_", case_sensitive=False)

    # dev/test bootstrap the credential schema on initialize; prod relies on Alembic.
    env: Literal["dev", "test", "prod"] = "prod"
    service_name: str = "xmpp-auth"
    log_level: str = "INFO"

    # Replaces the connection string derived from the config document when set.
    store_url: str | None = Field(default=None, repr=False)
    store_pool_size: int = Field(default=5, ge=1)
    store_pool_timeout: float = Field(default=10.0, gt=0)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Hosts embedding the plugin may construct `Settings(...)` directly instead of
# relying on environment variables.
