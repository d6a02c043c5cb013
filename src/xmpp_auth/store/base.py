"""
xmpp_auth.store.base

Credential store contract.

Responsibilities:
- Define the operations the auth core requires from a credential backend.
- Fix the failure semantics: "no such user / wrong password" is an answer,
  infrastructure trouble is `StoreUnavailable`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from xmpp_auth.auth.models import UserIdentifier


@dataclass(frozen=True, slots=True)
class CredentialCheck:
    ok: bool
    roles: frozenset[str] = frozenset()


class CredentialStore(ABC):
    """
    Async credential backend. Implementations must be safe for concurrent
    calls from independent connections and must raise
    `xmpp_auth.errors.StoreUnavailable` for infrastructure failures.
    """

    # Digest mechanisms need the secret (or material derived from it) back.
    supports_secret_retrieval: bool = True

    @abstractmethod
    async def check_credentials(self, identifier: UserIdentifier, password: str) -> CredentialCheck:
        """Return ok + roles when the password matches; ok=False for unknown users too."""

    @abstractmethod
    async def list_all_roles(self) -> frozenset[str]:
        ...

    @abstractmethod
    async def lookup_secret(self, identifier: UserIdentifier) -> str | None:
        """Return the stored secret, or None when the user is unknown."""

    @abstractmethod
    async def lookup_roles(self, identifier: UserIdentifier) -> frozenset[str]:
        ...

    async def list_distribution_roles(self) -> frozenset[str]:
        # Backends that do not separate distribution lists from security roles.
        return await self.list_all_roles()

    async def close(self) -> None:
        return None


# --- Module Notes -----------------------------------------------------------
# Stores are keyed by the bare JID; resources never influence a lookup.
