"""
xmpp_auth.config

Plugin configuration parsed from the host's configuration document.

Responsibilities:
- Validate enabled mechanisms (unknown names fail, never silently dropped).
- Validate credential-store connection fields for store-backed mechanisms.
- Render the store connection as a single SQLAlchemy URL.

Document shape (already parsed by the host from its XML section)::

    {
        "mechanism": ["PLAIN", "DIGEST-MD5"],
        "nonsasldigest": "True",
        "nonsaslplain": "False",
        "type": "mysql",
        "host": "db.internal",
        "database": "xmpp",
        "user": "xmpp",
        "pass": "...",
    }
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from sqlalchemy.engine import URL

from xmpp_auth.errors import ConfigurationError


class Mechanism(enum.StrEnum):
    # Values are the SASL names advertised to clients.
    plain = "PLAIN"
    digest_md5 = "DIGEST-MD5"
    anonymous = "ANONYMOUS"


class StoreType(enum.StrEnum):
    mysql = "mysql"
    postgresql = "postgresql"
    sqlite = "sqlite"


_DRIVERS: dict[StoreType, str] = {
    StoreType.mysql: "mysql+aiomysql",
    StoreType.postgresql: "postgresql+asyncpg",
    StoreType.sqlite: "sqlite+aiosqlite",
}

_STORE_BACKED = frozenset({Mechanism.plain, Mechanism.digest_md5})


class StoreConnectionInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: StoreType = StoreType.mysql
    host: str = ""
    database: str = ""
    user: str = ""
    password: str = Field(default="", repr=False)

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower() or StoreType.mysql
        return value

    @field_validator("host")
    @classmethod
    def _check_port(cls, value: str) -> str:
        _, sep, port = value.strip().partition(":")
        if sep and not (port.isdigit() and 0 < int(port) < 65536):
            raise ValueError(f"invalid port in store host: {value!r}")
        return value.strip()

    def missing_fields(self) -> list[str]:
        if self.type is StoreType.sqlite:
            required = {"database": self.database}
        else:
            required = {
                "host": self.host,
                "database": self.database,
                "user": self.user,
                "pass": self.password,
            }
        return [name for name, value in required.items() if not value.strip()]

    def url(self) -> URL:
        if self.type is StoreType.sqlite:
            return URL.create(_DRIVERS[self.type], database=self.database)
        host, _, port = self.host.partition(":")
        return URL.create(
            _DRIVERS[self.type],
            username=self.user,
            password=self.password,
            host=host,
            port=int(port) if port else None,
            database=self.database,
        )

    def connection_string(self) -> str:
        return self.url().render_as_string(hide_password=False)


class AuthConfig(BaseModel):
    """
    Immutable plugin configuration. Build it with `from_document`.
    """

    model_config = ConfigDict(frozen=True)

    # Capabilities advertised to the host; roles are enumerable but not editable here.
    supports_role_enumeration: ClassVar[bool] = True
    supports_role_management: ClassVar[bool] = False
    supports_user_management: ClassVar[bool] = False

    mechanisms: frozenset[Mechanism]
    non_sasl_plain: bool = False
    non_sasl_digest: bool = False
    store: StoreConnectionInfo = Field(default_factory=StoreConnectionInfo)

    @field_validator("mechanisms", mode="before")
    @classmethod
    def _parse_mechanisms(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = [value]
        if value is None:
            return value
        names = [str(v).strip().upper() for v in value]
        known = {m.value for m in Mechanism}
        unknown = sorted({n for n in names if n not in known})
        if unknown:
            raise ValueError(f"unsupported mechanism(s): {', '.join(unknown)}")
        return frozenset(Mechanism(n) for n in names)

    @model_validator(mode="after")
    def _check_consistency(self) -> AuthConfig:
        if not self.mechanisms:
            raise ValueError("at least one mechanism must be enabled")
        if self.requires_store():
            missing = self.store.missing_fields()
            if missing:
                raise ValueError(f"store connection fields required: {', '.join(missing)}")
        return self

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> AuthConfig:
        if "mechanism" not in document:
            raise ConfigurationError("config is missing 'mechanism'")
        try:
            return cls(
                mechanisms=document["mechanism"],
                non_sasl_plain=document.get("nonsaslplain", False),
                non_sasl_digest=document.get("nonsasldigest", False),
                store=StoreConnectionInfo(
                    type=document.get("type", StoreType.mysql),
                    host=document.get("host", ""),
                    database=document.get("database", ""),
                    user=document.get("user", ""),
                    password=document.get("pass", ""),
                ),
            )
        except ValidationError as e:
            raise ConfigurationError(_describe(e)) from e

    def to_document(self) -> dict[str, Any]:
        return {
            "mechanism": sorted(m.value for m in self.mechanisms),
            "nonsasldigest": self.non_sasl_digest,
            "nonsaslplain": self.non_sasl_plain,
            "type": self.store.type.value,
            "host": self.store.host,
            "database": self.store.database,
            "user": self.store.user,
            "pass": "********" if self.store.password else "",
        }

    def supported_mechanisms(self) -> frozenset[Mechanism]:
        return self.mechanisms

    def allows_non_sasl_plain(self) -> bool:
        return self.non_sasl_plain

    def allows_non_sasl_digest(self) -> bool:
        return self.non_sasl_digest

    def store_connection_info(self) -> StoreConnectionInfo:
        return self.store

    def requires_store(self) -> bool:
        return bool(self.mechanisms & _STORE_BACKED) or self.non_sasl_plain or self.non_sasl_digest

    def requires_secret_retrieval(self) -> bool:
        return Mechanism.digest_md5 in self.mechanisms or self.non_sasl_digest


def _describe(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err["loc"])
        msg = err["msg"].removeprefix("Value error, ")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts)


# --- Module Notes -----------------------------------------------------------
# Store connection fields are only required when a store-backed mechanism is on;
# an ANONYMOUS-only deployment needs no database.
