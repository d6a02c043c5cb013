"""
xmpp_auth.store.memory

Dict-backed credential store for tests and local experiments.
"""

from __future__ import annotations

import hmac
from collections.abc import Iterable
from dataclasses import dataclass

from xmpp_auth.auth.models import UserIdentifier
from xmpp_auth.store.base import CredentialCheck, CredentialStore


@dataclass(frozen=True, slots=True)
class _Entry:
    secret: str
    roles: frozenset[str]


class InMemoryCredentialStore(CredentialStore):
    def __init__(self, *, extra_roles: Iterable[str] = ()) -> None:
        self._users: dict[str, _Entry] = {}
        # Roles that exist without any member (e.g. freshly provisioned groups).
        self._extra_roles = frozenset(extra_roles)

    def add_user(
        self, identifier: UserIdentifier | str, password: str, roles: Iterable[str] = ()
    ) -> None:
        jid = UserIdentifier.coerce(identifier).bare
        self._users[jid] = _Entry(secret=password, roles=frozenset(roles))

    async def check_credentials(self, identifier: UserIdentifier, password: str) -> CredentialCheck:
        entry = self._users.get(identifier.bare)
        if entry is None or not hmac.compare_digest(
            entry.secret.encode("utf-8"), password.encode("utf-8")
        ):
            return CredentialCheck(ok=False)
        return CredentialCheck(ok=True, roles=entry.roles)

    async def list_all_roles(self) -> frozenset[str]:
        roles = set(self._extra_roles)
        for entry in self._users.values():
            roles |= entry.roles
        return frozenset(roles)

    async def lookup_secret(self, identifier: UserIdentifier) -> str | None:
        entry = self._users.get(identifier.bare)
        return entry.secret if entry is not None else None

    async def lookup_roles(self, identifier: UserIdentifier) -> frozenset[str]:
        entry = self._users.get(identifier.bare)
        return entry.roles if entry is not None else frozenset()
