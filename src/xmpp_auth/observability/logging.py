"""
xmpp_auth.observability.logging

Structured logging configuration for the plugin.

Responsibilities:
- Configure `structlog` for JSON logs that sit alongside the host server's logs.
- Own only the `xmpp_auth` logger tree; the host's root logger is left untouched.
- Provide a small wrapper for obtaining bound loggers.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


PACKAGE_LOGGER = "xmpp_auth"


def configure_logging(*, service_name: str, level: str) -> None:
    pkg = logging.getLogger(PACKAGE_LOGGER)
    pkg.setLevel(getattr(logging, level.upper(), logging.INFO))
    if not any(getattr(h, "_xmpp_auth", False) for h in pkg.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
        handler._xmpp_auth = True  # type: ignore[attr-defined]
        pkg.addHandler(handler)
    # JSON lines are already complete; do not hand them to the host's root handlers too.
    pkg.propagate = False

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _add_service_name(service_name),
            _drop_secrets,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _add_service_name(service_name: str):
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


_SECRET_KEYS = frozenset({"password", "pass", "secret", "digest"})


def _drop_secrets(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    # Credentials must never reach log sinks, even if a caller binds one by mistake.
    for key in _SECRET_KEYS & event_dict.keys():
        event_dict[key] = "[redacted]"
    return event_dict


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


# --- Module Notes -----------------------------------------------------------
# Attempt-scoped metadata is bound via contextvars in `observability.context`.
