"""
xmpp_auth.auth

Authentication/authorization package.

Responsibilities:
- Identity types (`UserIdentifier`, `Principal`) and their builders.
- Digest helpers and the mechanism dispatch core (`AuthManager`).
"""

# Package marker; import from submodules directly.
