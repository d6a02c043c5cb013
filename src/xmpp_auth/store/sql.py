"""
xmpp_auth.store.sql

Relational credential store backed by SQLAlchemy's async engine.

Responsibilities:
- Check credentials and resolve roles through the `xmpp_auth.db` repositories.
- Open one pooled session per call and release it on every exit path.
- Translate driver/pool failures into `StoreUnavailable`.
"""

from __future__ import annotations

import hmac
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager

from sqlalchemy.engine import URL
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from xmpp_auth.auth.models import UserIdentifier
from xmpp_auth.db.init_db import init_db
from xmpp_auth.db.repositories.roles import RoleRepo
from xmpp_auth.db.repositories.users import UserRepo
from xmpp_auth.db.session import create_engine, create_sessionmaker
from xmpp_auth.errors import StoreUnavailable
from xmpp_auth.settings import Settings
from xmpp_auth.store.base import CredentialCheck, CredentialStore


class SqlCredentialStore(CredentialStore):
    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        self._sessions: async_sessionmaker[AsyncSession] = create_sessionmaker(engine)

    @classmethod
    def from_url(cls, url: str | URL, *, settings: Settings) -> SqlCredentialStore:
        return cls(create_engine(url, settings))

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self._sessions() as session:
                yield session
        except IntegrityError:
            # Constraint violations are caller errors, not outages.
            raise
        except (SQLAlchemyError, OSError) as e:
            raise StoreUnavailable(f"credential store unavailable: {type(e).__name__}") from e

    async def check_credentials(self, identifier: UserIdentifier, password: str) -> CredentialCheck:
        async with self._session() as session:
            user = await UserRepo(session).get_by_jid(identifier.bare)
            if user is None or not hmac.compare_digest(
                user.password.encode("utf-8"), password.encode("utf-8")
            ):
                return CredentialCheck(ok=False)
            return CredentialCheck(ok=True, roles=frozenset(r.name for r in user.roles))

    async def list_all_roles(self) -> frozenset[str]:
        async with self._session() as session:
            return frozenset(await RoleRepo(session).list_names())

    async def lookup_secret(self, identifier: UserIdentifier) -> str | None:
        async with self._session() as session:
            return await UserRepo(session).get_secret(identifier.bare)

    async def lookup_roles(self, identifier: UserIdentifier) -> frozenset[str]:
        async with self._session() as session:
            return frozenset(await UserRepo(session).role_names(identifier.bare))

    async def create_schema(self) -> None:
        try:
            await init_db(self._engine)
        except (SQLAlchemyError, OSError) as e:
            raise StoreUnavailable(f"credential store unavailable: {type(e).__name__}") from e

    async def add_user(
        self, identifier: UserIdentifier | str, password: str, roles: Iterable[str] = ()
    ) -> None:
        jid = UserIdentifier.coerce(identifier).bare
        async with self._session() as session:
            await UserRepo(session).create(jid=jid, password=password, roles=roles)
            await session.commit()

    async def add_role(self, name: str) -> None:
        async with self._session() as session:
            await RoleRepo(session).get_or_create(name)
            await session.commit()

    async def close(self) -> None:
        # Dispose the engine to close pools/FDs gracefully.
        await self._engine.dispose()


# --- Module Notes -----------------------------------------------------------
# Secrets are compared with `hmac.compare_digest` so response timing does not
# reveal how much of a password matched.
