"""
xmpp_auth.auth.models

Auth domain models.

Responsibilities:
- Define the structured user identifier (`local@domain/resource`).
- Define the identity type (`Principal`) handed back to the host server.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class UserIdentifier:
    """
    Structured JID. Equality and hashing use only the normalized local/domain
    pair; the resource is carried along but ignored for authentication.
    """

    local: str
    domain: str
    resource: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        local = (self.local or "").strip()
        domain = (self.domain or "").strip().rstrip(".")
        if not local:
            raise ValueError("identifier local-part must not be empty")
        if not domain:
            raise ValueError("identifier domain-part must not be empty")
        # Frozen dataclass: normalize via object.__setattr__.
        object.__setattr__(self, "local", local.casefold())
        object.__setattr__(self, "domain", domain.lower())
        object.__setattr__(self, "resource", (self.resource or "").strip())

    @classmethod
    def parse(cls, raw: str) -> UserIdentifier:
        if not raw or not raw.strip():
            raise ValueError("identifier must not be empty")
        bare, sep, resource = raw.strip().partition("/")
        if sep and not resource:
            raise ValueError(f"identifier has an empty resource-part: {raw!r}")
        local, at, domain = bare.rpartition("@")
        if not at:
            raise ValueError(f"identifier has no local-part: {raw!r}")
        return cls(local=local, domain=domain, resource=resource)

    @classmethod
    def coerce(cls, value: UserIdentifier | str | None) -> UserIdentifier:
        if value is None:
            raise ValueError("identifier must not be None")
        if isinstance(value, UserIdentifier):
            return value
        return cls.parse(value)

    @property
    def bare(self) -> str:
        return f"{self.local}@{self.domain}"

    def __str__(self) -> str:
        if self.resource:
            return f"{self.bare}/{self.resource}"
        return self.bare


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Resolved identity + authentication outcome + role set for one attempt.
    """

    identifier: UserIdentifier
    authenticated: bool = False
    roles: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        if not isinstance(self.identifier, UserIdentifier):
            raise ValueError("principal requires a UserIdentifier")
        object.__setattr__(self, "roles", frozenset(self.roles))
        # Privileges without a successful credential check are never representable.
        if not self.authenticated and self.roles:
            raise ValueError("unauthenticated principal cannot carry roles")

    def is_in_role(self, role: str) -> bool:
        return role in self.roles


# --- Module Notes -----------------------------------------------------------
# Both types are immutable and safe to share across concurrent connections.
