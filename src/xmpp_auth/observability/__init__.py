"""
xmpp_auth.observability

Observability package.

Responsibilities:
- Structured logging configuration.
- Per-attempt context propagation for consistent log enrichment.
"""

# Package marker.
