"""
xmpp_auth.db.models

Credential store schema.

Responsibilities:
- Define ORM models for users, roles and their association:
  - User: bare JID (normalized) and retrievable secret
  - Role: named security/distribution role
  - user_roles: many-to-many membership
"""

from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from xmpp_auth.db.base import Base


user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Lower-cased `local@domain`; resources are never stored.
    jid: Mapped[str] = mapped_column(String(512), nullable=False, unique=True, index=True)
    # Retrievable secret: digest mechanisms recompute hashes from it server-side.
    password: Mapped[str] = mapped_column(String(1024), nullable=False)

    roles: Mapped[list[Role]] = relationship(secondary=user_roles, lazy="selectin")


class Role(Base):
    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False, unique=True)


# --- Module Notes -----------------------------------------------------------
# The schema does not distinguish security roles from distribution roles; both
# enumerations read the `roles` table.
