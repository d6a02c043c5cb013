"""
xmpp_auth.auth.credentials

Credential requests, one type per supported mechanism.

The host builds one of these from the negotiated exchange and hands it to
`AuthManager.authenticate`, which dispatches on the type.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from xmpp_auth.auth.models import UserIdentifier


@dataclass(frozen=True, slots=True)
class PlainCredentials:
    identifier: UserIdentifier
    password: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class DigestCredentials:
    identifier: UserIdentifier
    session_nonce: str
    digest: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class AnonymousCredentials:
    domain: str


CredentialRequest = PlainCredentials | DigestCredentials | AnonymousCredentials
