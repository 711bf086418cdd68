"""Time-windowed HMAC nonces.

A nonce is an HMAC of ``tick|action|subject`` under the process secret,
where ``tick`` advances every half lifetime. A nonce therefore stays valid
for between one half and one full lifetime, and never outside the action
(and subject) it was created for.
"""

from __future__ import annotations

import math
from typing import Callable

from errors import InvalidRangeError
from shared.crypto import constant_time_equals, derive_hex
from shared.datetime_utils import unix_now

NONCE_LENGTH = 10


class HmacNonceProvider:
    def __init__(
        self,
        secret: str,
        lifetime_seconds: int = 86400,
        subject: str = "",
        clock: Callable[[], int] = unix_now,
    ) -> None:
        if lifetime_seconds < 2:
            raise InvalidRangeError(
                "lifetime_seconds must be at least 2", field="lifetime_seconds"
            )
        self._secret = secret
        self.lifetime_seconds = lifetime_seconds
        self.subject = subject
        self._clock = clock

    def _tick(self) -> int:
        return math.ceil(self._clock() / (self.lifetime_seconds / 2))

    def _nonce(self, action: str, tick: int) -> str:
        return derive_hex(f"{tick}|{action}|{self.subject}", self._secret, NONCE_LENGTH)

    def create_binding(self, action: str) -> str:
        return self._nonce(action, self._tick())

    def verify_binding(self, action: str, nonce: str) -> bool:
        """Accept nonces from the current or the previous tick."""
        if not nonce:
            return False
        tick = self._tick()
        return any(
            constant_time_equals(self._nonce(action, t), nonce)
            for t in (tick, tick - 1)
        )
