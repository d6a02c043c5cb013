"""
xmpp_auth.db.init_db

DB initialization helpers (dev/test convenience).

Responsibilities:
- Create credential tables for local development and tests.
- Keep production migration workflow separate (Alembic).
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from xmpp_auth.db import models  # noqa: F401  # register tables on Base.metadata
from xmpp_auth.db.base import Base


async def init_db(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# --- Module Notes -----------------------------------------------------------
# Production deployments usually point at an existing user database; never
# call this against it.
