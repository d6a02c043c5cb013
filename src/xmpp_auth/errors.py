"""
xmpp_auth.errors

Exception taxonomy for the plugin.

Responsibilities:
- Separate configuration faults, disabled mechanisms, unknown users and
  infrastructure failures.

A failed credential check is not an exception: it yields an unauthenticated
`Principal`. `StoreUnavailable` means the outcome could not be determined and
must never be treated as a rejection.
"""

from __future__ import annotations


class AuthPluginError(Exception):
    pass


class ConfigurationError(AuthPluginError):
    """Malformed or incomplete plugin configuration; fatal at initialize."""


class MechanismNotEnabled(AuthPluginError):
    def __init__(self, mechanism: str) -> None:
        super().__init__(f"mechanism not enabled: {mechanism}")
        self.mechanism = mechanism


class UnknownUser(AuthPluginError):
    """Raised by operations that need the user to exist before any comparison."""

    def __init__(self, jid: str) -> None:
        super().__init__(f"unknown user: {jid}")
        self.jid = jid


class StoreUnavailable(AuthPluginError):
    """The credential store could not be reached or answered with a protocol error."""
