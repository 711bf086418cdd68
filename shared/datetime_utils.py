"""
Date/time helpers: the UTC clock and expiry formatting.

Expiry arithmetic reads the clock through utc_now() and unix_now() only.
"""

from __future__ import annotations

from datetime import datetime, timezone

EXPIRES_FORMAT = "%Y-%m-%d %H:%M:%S"


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def unix_now() -> int:
    """Return the current Unix time in whole seconds."""
    return int(utc_now().timestamp())


def format_utc(timestamp: int) -> str:
    """Format a Unix timestamp as ``YYYY-MM-DD HH:MM:SS`` in UTC.

    Args:
        timestamp: Seconds since the epoch.

    Returns:
        The formatted UTC datetime string.
    """
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime(EXPIRES_FORMAT)
