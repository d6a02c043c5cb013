"""
alembic.env

Alembic migration environment for the credential store schema.

Responsibilities:
- Provide metadata discovery for autogeneration.
- Configure offline/online migration execution against the async drivers.

Notes:
- This module is executed by Alembic, not imported by the plugin at runtime.
"""

from __future__ import annotations

import asyncio
import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from xmpp_auth.db import models  # noqa: F401  # ensure models are registered on Base.metadata
from xmpp_auth.db.base import Base
from xmpp_auth.settings import Settings

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _get_database_url() -> str:
    if "XMPP_AUTH_STORE_URL" in os.environ:
        return os.environ["XMPP_AUTH_STORE_URL"]
    url = Settings().store_url
    if not url:
        raise RuntimeError("set XMPP_AUTH_STORE_URL to run migrations")
    return url


def run_migrations_offline() -> None:
    # Offline: emit SQL scripts without a DB connection.
    context.configure(
        url=_get_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_sync_migrations(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = _get_database_url()
    connectable = async_engine_from_config(
        configuration, prefix="sqlalchemy.", poolclass=pool.NullPool
    )

    async with connectable.connect() as connection:
        await connection.run_sync(_run_sync_migrations)
    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())


# --- Module Notes -----------------------------------------------------------
# Keep this file aligned with SQLAlchemy metadata definitions in `xmpp_auth.db.models`.
