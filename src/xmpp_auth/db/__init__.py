"""
xmpp_auth.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, and repositories for the
  relational credential store.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Only `xmpp_auth.store.sql` imports from here; the auth core never touches the ORM.
