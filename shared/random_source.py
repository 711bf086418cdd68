"""
Random index and byte sources.

Two tiers:

- SecureRandomSource draws from the operating system CSPRNG (``os.urandom``)
  and maps bytes onto ``[0, n)`` by rejection sampling: the draw is masked to
  the bit length of ``n - 1`` and retried while it is ``>= n``. Every
  accepted value is equally likely, and the expected number of draws is
  below two. ``byte % n`` is never used because it favours small values
  whenever ``n`` does not divide the byte range.
- WeakRandomSource wraps ``random.Random``. It is uniform but predictable
  and is only used when the caller opts out of security or the secure
  source reports itself unavailable.

TieredRandomSource composes the two. SecureSourceUnavailable is the only
signal that moves a call onto the fallback; every other error propagates.
"""

from __future__ import annotations

import os
import random
from typing import Callable, Optional, Protocol, runtime_checkable

from errors import InvalidRangeError, SecureSourceUnavailable
from shared.logging import get_logger

log = get_logger(__name__)


@runtime_checkable
class RandomSource(Protocol):
    def uniform(self, n: int) -> int: ...

    def token_bytes(self, n: int) -> bytes: ...


def _check_range(n: int) -> None:
    if n <= 0:
        raise InvalidRangeError(
            f"Range upper bound must be positive, got {n}", field="n"
        )


def _check_byte_count(n: int) -> None:
    if n < 0:
        raise InvalidRangeError(
            f"Byte count must not be negative, got {n}", field="n"
        )


class SecureRandomSource:
    """Unbiased sampling on top of a cryptographically secure byte source."""

    def __init__(self, byte_source: Callable[[int], bytes] = os.urandom) -> None:
        self._byte_source = byte_source

    def token_bytes(self, n: int) -> bytes:
        _check_byte_count(n)
        try:
            return self._byte_source(n)
        except (OSError, NotImplementedError) as e:
            raise SecureSourceUnavailable(
                "Secure random source is unavailable",
                details={"error": str(e), "error_type": type(e).__name__},
            ) from e

    def uniform(self, n: int) -> int:
        _check_range(n)
        if n == 1:
            return 0
        bits = (n - 1).bit_length()
        num_bytes = (bits + 7) // 8
        mask = (1 << bits) - 1
        while True:
            value = int.from_bytes(self.token_bytes(num_bytes), "big") & mask
            if value < n:
                return value


class WeakRandomSource:
    """Non-cryptographic source; always available, seedable for tests."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self._random = random.Random(seed)

    def token_bytes(self, n: int) -> bytes:
        _check_byte_count(n)
        return bytes(self._random.randrange(256) for _ in range(n))

    def uniform(self, n: int) -> int:
        _check_range(n)
        return self._random.randrange(n)


class TieredRandomSource:
    """Serve from *primary*, falling back when it reports unavailability."""

    def __init__(self, primary: RandomSource, fallback: RandomSource) -> None:
        self.primary = primary
        self.fallback = fallback

    def token_bytes(self, n: int) -> bytes:
        try:
            return self.primary.token_bytes(n)
        except SecureSourceUnavailable as e:
            self._log_fallback(e)
            return self.fallback.token_bytes(n)

    def uniform(self, n: int) -> int:
        try:
            return self.primary.uniform(n)
        except SecureSourceUnavailable as e:
            self._log_fallback(e)
            return self.fallback.uniform(n)

    @staticmethod
    def _log_fallback(exc: SecureSourceUnavailable) -> None:
        log.warning(
            "secure_random_unavailable",
            fallback="weak",
            error=(exc.details or {}).get("error"),
        )


_weak_source = WeakRandomSource()
_default_source = TieredRandomSource(SecureRandomSource(), _weak_source)


def default_source() -> RandomSource:
    """Return the process-wide secure source with weak fallback."""
    return _default_source


def weak_source() -> RandomSource:
    """Return the process-wide non-cryptographic source."""
    return _weak_source
