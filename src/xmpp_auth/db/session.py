"""
xmpp_auth.db.session

Async SQLAlchemy engine + session factory helpers.

Responsibilities:
- Create the pooled async engine for the credential store.
- Create the async sessionmaker with safe defaults.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from xmpp_auth.settings import Settings


def create_engine(url: str | URL, settings: Settings) -> AsyncEngine:
    url = make_url(url)
    kwargs: dict[str, Any] = {"pool_pre_ping": True}
    if url.get_backend_name() != "sqlite":
        # Every verification call checks a connection out of this pool and returns it.
        kwargs["pool_size"] = settings.store_pool_size
        kwargs["pool_timeout"] = settings.store_pool_timeout
    return create_async_engine(url, **kwargs)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Read-mostly workload: no autoflush, no expiry after commit.
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False,
    )
