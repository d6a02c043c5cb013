"""
xmpp_auth.auth.digest

Digest computations shared by the digest-based mechanisms.

Responsibilities:
- Non-SASL digest (XEP-0078): hex SHA-1 of the stream/session id followed by the secret.
- DIGEST-MD5 user/realm/secret hash (RFC 2831 `H(username:realm:password)`).
- Case-insensitive, constant-time comparison of hex digests.
"""

from __future__ import annotations

import hashlib
import hmac


def non_sasl_digest(session_nonce: str, secret: str) -> str:
    return hashlib.sha1((session_nonce + secret).encode("utf-8")).hexdigest()


def user_realm_secret_hash(username: str, realm: str, secret: str) -> str:
    # UTF-8 throughout; clients limited to ISO-8859-1 produce the same bytes for ASCII input.
    return hashlib.md5(f"{username}:{realm}:{secret}".encode("utf-8")).hexdigest()


def digests_match(expected: str, presented: str | None) -> bool:
    if not presented:
        return False
    return hmac.compare_digest(
        expected.strip().lower().encode("ascii", "replace"),
        presented.strip().lower().encode("ascii", "replace"),
    )
