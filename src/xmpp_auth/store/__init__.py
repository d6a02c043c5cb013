"""
xmpp_auth.store

Credential store contract and adapters.

Responsibilities:
- Define the async `CredentialStore` interface the auth core depends on.
- Ship a relational adapter (`SqlCredentialStore`) and an in-memory fake.
"""

from xmpp_auth.store.base import CredentialCheck, CredentialStore
from xmpp_auth.store.memory import InMemoryCredentialStore

__all__ = ["CredentialCheck", "CredentialStore", "InMemoryCredentialStore"]


# --- Module Notes -----------------------------------------------------------
# `SqlCredentialStore` is imported from `xmpp_auth.store.sql` explicitly so the
# in-memory fake stays importable without touching the ORM.
