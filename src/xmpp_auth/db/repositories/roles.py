from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from xmpp_auth.db.models import Role


class RoleRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_names(self) -> list[str]:
        stmt = select(Role.name).order_by(Role.name)
        return list((await self._session.execute(stmt)).scalars().all())

    async def get_or_create(self, name: str) -> Role:
        stmt = select(Role).where(Role.name == name)
        existing = (await self._session.execute(stmt)).scalar_one_or_none()
        if existing is not None:
            return existing
        role = Role(name=name)
        self._session.add(role)
        await self._session.flush()
        return role
