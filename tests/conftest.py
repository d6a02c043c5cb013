"""
tests.conftest

Shared fixtures for the plugin test suite.
"""

from __future__ import annotations

from typing import Any

import pytest

from xmpp_auth.auth.models import UserIdentifier
from xmpp_auth.config import AuthConfig
from xmpp_auth.errors import StoreUnavailable
from xmpp_auth.settings import Settings
from xmpp_auth.store.base import CredentialCheck, CredentialStore
from xmpp_auth.store.memory import InMemoryCredentialStore


class CountingStore(InMemoryCredentialStore):
    def __init__(self) -> None:
        super().__init__(extra_roles={"Auditors"})
        self.calls: dict[str, int] = {}

    def _count(self, name: str) -> None:
        self.calls[name] = self.calls.get(name, 0) + 1

    async def check_credentials(self, identifier: UserIdentifier, password: str) -> CredentialCheck:
        self._count("check_credentials")
        return await super().check_credentials(identifier, password)

    async def lookup_secret(self, identifier: UserIdentifier) -> str | None:
        self._count("lookup_secret")
        return await super().lookup_secret(identifier)

    async def lookup_roles(self, identifier: UserIdentifier) -> frozenset[str]:
        self._count("lookup_roles")
        return await super().lookup_roles(identifier)


class DownStore(CredentialStore):
    async def check_credentials(self, identifier: UserIdentifier, password: str) -> CredentialCheck:
        raise StoreUnavailable("connection refused")

    async def list_all_roles(self) -> frozenset[str]:
        raise StoreUnavailable("connection refused")

    async def lookup_secret(self, identifier: UserIdentifier) -> str | None:
        raise StoreUnavailable("connection refused")

    async def lookup_roles(self, identifier: UserIdentifier) -> frozenset[str]:
        raise StoreUnavailable("connection refused")


@pytest.fixture
def settings() -> Settings:
    return Settings(env="test", log_level="DEBUG", store_url=None)


@pytest.fixture
def document() -> dict[str, Any]:
    return {
        "mechanism": ["PLAIN", "DIGEST-MD5", "ANONYMOUS"],
        "nonsasldigest": "True",
        "nonsaslplain": "True",
        "type": "mysql",
        "host": "db.internal",
        "database": "xmpp",
        "user": "xmpp",
        "pass": "s3cret-db",
    }


@pytest.fixture
def config(document: dict[str, Any]) -> AuthConfig:
    return AuthConfig.from_document(document)


@pytest.fixture
def store() -> CountingStore:
    s = CountingStore()
    s.add_user("alice@example.com", "s3cret", roles={"User"})
    s.add_user("carol@example.com", "hunter2", roles={"User", "Administrator"})
    return s
