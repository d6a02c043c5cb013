"""
xmpp_auth.db.repositories

Repository package.

Responsibilities:
- Group data-access repositories for the credential store.
"""

# Package marker; repositories are imported directly from submodules.


# --- Module Notes -----------------------------------------------------------
# Repositories are intentionally thin; verification policy belongs in `auth.manager`.
