"""
xmpp_auth.auth.manager

Mechanism dispatch core.

Responsibilities:
- One verification path per supported mechanism, each returning a `Principal`.
- Principal resolution for handshakes that already established trust.
- Role enumeration for the host's authorization/distribution decisions.

Verification failure is a normal outcome (unauthenticated principal with no
roles). Store outages raise `StoreUnavailable` and are never folded into a
rejection. Roles are re-read from the store on every call.
"""

from __future__ import annotations

import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from xmpp_auth.auth.credentials import (
    AnonymousCredentials,
    CredentialRequest,
    DigestCredentials,
    PlainCredentials,
)
from xmpp_auth.auth.digest import digests_match, non_sasl_digest, user_realm_secret_hash
from xmpp_auth.auth.models import Principal, UserIdentifier
from xmpp_auth.auth.principal import authenticated_principal, new_principal
from xmpp_auth.config import AuthConfig, Mechanism
from xmpp_auth.errors import MechanismNotEnabled, StoreUnavailable, UnknownUser
from xmpp_auth.observability.context import attempt_context
from xmpp_auth.observability.logging import get_logger
from xmpp_auth.store.base import CredentialStore

log = get_logger(__name__)

NON_SASL_DIGEST = "NONSASL-DIGEST"


class AuthManager:
    def __init__(self, *, config: AuthConfig, store: CredentialStore) -> None:
        self._config = config
        self._store = store

    @property
    def config(self) -> AuthConfig:
        return self._config

    async def authenticate(self, request: CredentialRequest) -> Principal:
        # Closed set: one case per mechanism the host can negotiate.
        if isinstance(request, PlainCredentials):
            return await self.verify_plain(request.identifier, request.password)
        if isinstance(request, DigestCredentials):
            return await self.verify_digest(
                request.identifier, request.session_nonce, request.digest
            )
        if isinstance(request, AnonymousCredentials):
            return await self.verify_anonymous(request.domain)
        raise TypeError(f"unsupported credential request: {type(request).__name__}")

    async def verify_plain(self, identifier: UserIdentifier | str, password: str) -> Principal:
        if not (
            Mechanism.plain in self._config.mechanisms or self._config.allows_non_sasl_plain()
        ):
            raise MechanismNotEnabled(Mechanism.plain.value)

        ident = UserIdentifier.coerce(identifier)
        async with self._attempt(Mechanism.plain.value, ident):
            check = await self._store.check_credentials(ident, password)
            if not check.ok:
                return self._rejected(ident)
            return self._accepted(ident, check.roles)

    async def verify_digest(
        self,
        identifier: UserIdentifier | str,
        session_nonce: str,
        presented_digest: str,
    ) -> Principal:
        if not self._config.allows_non_sasl_digest():
            raise MechanismNotEnabled(NON_SASL_DIGEST)

        ident = UserIdentifier.coerce(identifier)
        async with self._attempt(NON_SASL_DIGEST, ident):
            secret = await self._store.lookup_secret(ident)
            if secret is None:
                return self._rejected(ident)
            expected = non_sasl_digest(session_nonce, secret)
            if not digests_match(expected, presented_digest):
                return self._rejected(ident)
            roles = await self._store.lookup_roles(ident)
            return self._accepted(ident, roles)

    async def build_precomputed_secret_hash(
        self, identifier: UserIdentifier | str, realm: str
    ) -> str:
        """
        Hex `MD5(username:realm:secret)` for DIGEST-MD5, computed over the
        normalized JID parts (`local`, `domain`).

        A bare username is placed under `realm` to form the identifier; a full
        identifier keeps its own domain. A bare username with no realm cannot
        name a user and raises `UnknownUser`.
        """

        if Mechanism.digest_md5 not in self._config.mechanisms:
            raise MechanismNotEnabled(Mechanism.digest_md5.value)

        try:
            if isinstance(identifier, str) and "@" not in identifier:
                ident = UserIdentifier(local=identifier, domain=realm)
            else:
                ident = UserIdentifier.coerce(identifier)
        except ValueError as e:
            log.info("auth.unknown_user", mechanism=Mechanism.digest_md5.value)
            raise UnknownUser(f"{identifier}@{realm}") from e

        async with self._attempt(Mechanism.digest_md5.value, ident):
            secret = await self._store.lookup_secret(ident)
            if secret is None:
                log.info("auth.unknown_user")
                raise UnknownUser(ident.bare)
            return user_realm_secret_hash(ident.local, ident.domain, secret)

    async def resolve_principal(
        self, identifier: UserIdentifier | str, already_authenticated: bool
    ) -> Principal:
        ident = UserIdentifier.coerce(identifier)
        if not already_authenticated:
            return new_principal(ident)
        async with self._attempt("RESOLVE", ident):
            roles = await self._store.lookup_roles(ident)
            return authenticated_principal(ident, roles)

    async def verify_anonymous(self, domain: str) -> Principal:
        if Mechanism.anonymous not in self._config.mechanisms:
            raise MechanismNotEnabled(Mechanism.anonymous.value)

        ident = UserIdentifier(local=uuid.uuid4().hex, domain=domain)
        with attempt_context(mechanism=Mechanism.anonymous.value, jid=ident.bare):
            log.info("auth.accepted", roles=0)
            return authenticated_principal(ident)

    async def list_security_roles(self) -> frozenset[str]:
        async with self._attempt("ROLES"):
            return await self._store.list_all_roles()

    async def list_distribution_roles(self) -> frozenset[str]:
        async with self._attempt("ROLES"):
            return await self._store.list_distribution_roles()

    @asynccontextmanager
    async def _attempt(
        self, mechanism: str, ident: UserIdentifier | None = None
    ) -> AsyncIterator[None]:
        with attempt_context(mechanism=mechanism, jid=ident.bare if ident else None):
            try:
                yield
            except StoreUnavailable:
                # Outage, not a verdict: alert internally and let the host decide.
                log.error("auth.store_unavailable", exc_info=True)
                raise

    def _accepted(self, ident: UserIdentifier, roles: frozenset[str]) -> Principal:
        log.info("auth.accepted", roles=len(roles))
        return authenticated_principal(ident, roles)

    def _rejected(self, ident: UserIdentifier) -> Principal:
        # Unknown user and wrong password produce the same result and the same log line.
        log.info("auth.rejected")
        return new_principal(ident)


# --- Module Notes -----------------------------------------------------------
# The manager holds only the immutable config and the store handle, so one
# instance serves every connection concurrently.
