"""
xmpp_auth.db.repositories.users

Repository for `User` entities.

Responsibilities:
- Fetch users by bare JID together with their roles.
- Provision users and memberships (tests, bootstrap scripts).
"""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from xmpp_auth.db.models import Role, User
from xmpp_auth.db.repositories.roles import RoleRepo


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_jid(self, jid: str) -> User | None:
        stmt = select(User).where(User.jid == jid)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def get_secret(self, jid: str) -> str | None:
        stmt = select(User.password).where(User.jid == jid)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def role_names(self, jid: str) -> list[str]:
        stmt = select(Role.name).select_from(User).join(User.roles).where(User.jid == jid)
        return list((await self._session.execute(stmt)).scalars().all())

    async def create(self, *, jid: str, password: str, roles: Iterable[str] = ()) -> User:
        role_repo = RoleRepo(self._session)
        user = User(jid=jid, password=password)
        user.roles = [await role_repo.get_or_create(name) for name in dict.fromkeys(roles)]
        self._session.add(user)
        await self._session.flush()
        return user
