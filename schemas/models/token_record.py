"""
Magic-link token record.

Returned by generate_magic_token(). The caller owns persistence; store
``hashed()`` rather than the token itself and check presented tokens with
``matches()``.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from shared.crypto import constant_time_equals, hash_token
from shared.datetime_utils import unix_now


class TokenRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str
    expires: str  # UTC, "YYYY-MM-DD HH:MM:SS"
    expires_at: int  # Unix timestamp
    context: str = ""

    def is_expired(self, now: Optional[float] = None) -> bool:
        """True once *now* (default: current time) reaches ``expires_at``."""
        if now is None:
            now = unix_now()
        return now >= self.expires_at

    def hashed(self) -> str:
        """SHA-256 hex digest of ``token``, the form to persist."""
        return hash_token(self.token)

    def matches(self, stored_hash: str, now: Optional[float] = None) -> bool:
        """Check *stored_hash* against this token; expired records never match."""
        if self.is_expired(now):
            return False
        return constant_time_equals(self.hashed(), stored_hash)
