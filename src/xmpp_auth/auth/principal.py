"""
xmpp_auth.auth.principal

Pure constructors for `Principal` values.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from xmpp_auth.auth.models import Principal, UserIdentifier


def new_principal(identifier: UserIdentifier | str) -> Principal:
    return Principal(identifier=UserIdentifier.coerce(identifier))


def with_roles(principal: Principal, roles: Iterable[str]) -> Principal:
    # Principal.__post_init__ rejects roles on an unauthenticated principal.
    return replace(principal, roles=frozenset(roles))


def mark_authenticated(principal: Principal) -> Principal:
    return replace(principal, authenticated=True)


def authenticated_principal(
    identifier: UserIdentifier | str, roles: Iterable[str] = ()
) -> Principal:
    return with_roles(mark_authenticated(new_principal(identifier)), roles)
