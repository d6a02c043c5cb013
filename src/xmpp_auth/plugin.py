"""
xmpp_auth.plugin

Plugin lifecycle for the host server.

Responsibilities:
- Parse and validate the configuration document into an `AuthConfig`.
- Build (or accept) the credential store and check it can serve the
  configured mechanisms.
- Hand the host a ready `AuthManager`; dispose store resources on shutdown.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from xmpp_auth.auth.manager import AuthManager
from xmpp_auth.config import AuthConfig
from xmpp_auth.errors import AuthPluginError, ConfigurationError
from xmpp_auth.observability.logging import configure_logging, get_logger
from xmpp_auth.settings import Settings, get_settings
from xmpp_auth.store.base import CredentialStore
from xmpp_auth.store.memory import InMemoryCredentialStore
from xmpp_auth.store.sql import SqlCredentialStore

log = get_logger(__name__)


class AuthPlugin:
    """
    The host calls `initialize` exactly once before any verification and
    `shutdown` after the last one completes.
    """

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        store: CredentialStore | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._injected_store = store
        self._store: CredentialStore | None = None
        self._manager: AuthManager | None = None

    @property
    def ready(self) -> bool:
        return self._manager is not None

    @property
    def manager(self) -> AuthManager:
        if self._manager is None:
            raise AuthPluginError("plugin is not initialized")
        return self._manager

    async def initialize(self, document: Mapping[str, Any]) -> AuthManager:
        if self._manager is not None:
            raise AuthPluginError("plugin is already initialized")

        settings = self._settings
        configure_logging(service_name=settings.service_name, level=settings.log_level)

        try:
            config = AuthConfig.from_document(document)
        except ConfigurationError as e:
            log.error("plugin.config_invalid", error=str(e))
            raise

        store = self._build_store(config)
        try:
            if config.requires_secret_retrieval() and not store.supports_secret_retrieval:
                raise ConfigurationError(
                    "digest mechanisms need a credential store that can retrieve secrets"
                )
            if isinstance(store, SqlCredentialStore) and settings.env in ("dev", "test"):
                # Dev/test convenience: create tables automatically.
                await store.create_schema()
        except BaseException:
            if store is not self._injected_store:
                await store.close()
            raise

        self._store = store
        self._manager = AuthManager(config=config, store=store)
        log.info(
            "plugin.ready",
            env=settings.env,
            mechanisms=sorted(m.value for m in config.mechanisms),
            nonsaslplain=config.allows_non_sasl_plain(),
            nonsasldigest=config.allows_non_sasl_digest(),
        )
        return self._manager

    async def shutdown(self) -> None:
        store, self._store, self._manager = self._store, None, None
        if store is not None:
            await store.close()
            log.info("plugin.shutdown")

    def _build_store(self, config: AuthConfig) -> CredentialStore:
        if self._injected_store is not None:
            return self._injected_store
        if not config.requires_store():
            # ANONYMOUS-only deployments never consult a store.
            return InMemoryCredentialStore()
        info = config.store_connection_info()
        url = self._settings.store_url or info.url()
        try:
            return SqlCredentialStore.from_url(url, settings=self._settings)
        except ImportError as e:
            raise ConfigurationError(
                f"database driver for store type '{info.type.value}' is not installed"
            ) from e


# --- Module Notes -----------------------------------------------------------
# A failed initialize leaves the plugin not ready; the host may fix the config
# and call initialize again.
