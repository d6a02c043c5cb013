from __future__ import annotations

import logging

from xmpp_auth.observability.logging import PACKAGE_LOGGER, configure_logging


def test_configure_logging_leaves_root_logger_alone() -> None:
    root = logging.getLogger()
    root_handlers = list(root.handlers)
    root_level = root.level

    configure_logging(service_name="xmpp-auth", level="DEBUG")
    configure_logging(service_name="xmpp-auth", level="WARNING")

    assert root.handlers == root_handlers
    assert root.level == root_level

    pkg = logging.getLogger(PACKAGE_LOGGER)
    own = [h for h in pkg.handlers if getattr(h, "_xmpp_auth", False)]
    assert len(own) == 1
    assert pkg.level == logging.WARNING
    assert pkg.propagate is False
