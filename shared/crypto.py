"""
Cryptographic helpers: keyed derivation and token hashing.

Uses HMAC-SHA256 for keyed derivation and SHA-256 for token hashing.
"""

from __future__ import annotations

import hashlib
import hmac
import math


def derive_hex(message: str, key: str, length: int) -> str:
    """Return *length* hex characters derived from *message* under *key*.

    HMAC-SHA256 is run in counter mode (block ``i`` is
    ``HMAC(key, message || i)``), so any output length is available and
    every prefix is a one-way function of the inputs.

    Args:
        message: Input material.
        key: Secret key.
        length: Number of lowercase hex characters to return.

    Returns:
        Lowercase hex string of exactly *length* characters.
    """
    key_bytes = key.encode("utf-8")
    data = message.encode("utf-8")
    blocks = math.ceil(length / 64)
    digest = "".join(
        hmac.new(key_bytes, data + i.to_bytes(4, "big"), hashlib.sha256).hexdigest()
        for i in range(blocks)
    )
    return digest[:length]


def hash_token(token: str) -> str:
    """Lowercase SHA-256 hex digest of *token* (64 characters).

    TokenRecord.hashed() persists this in place of the plaintext.
    """
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def constant_time_equals(a: str, b: str) -> bool:
    """Compare two strings without leaking the mismatch position."""
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))
