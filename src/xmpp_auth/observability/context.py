"""
xmpp_auth.observability.context

Attempt-scoped logging context.

Responsibilities:
- Generate an id per authentication attempt.
- Bind attempt metadata into structlog contextvars for the duration of the call.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator
from contextlib import contextmanager

import structlog


@contextmanager
def attempt_context(*, mechanism: str, jid: str | None = None) -> Iterator[str]:
    attempt_id = str(uuid.uuid4())
    fields = {"attempt_id": attempt_id, "mechanism": mechanism}
    if jid is not None:
        fields["jid"] = jid
    # bound_contextvars restores the previous values on exit, so concurrent
    # attempts on separate tasks never see each other's fields.
    with structlog.contextvars.bound_contextvars(**fields):
        yield attempt_id


# --- Module Notes -----------------------------------------------------------
# Each asyncio task has its own contextvars copy; the host does not need to clear anything.
