"""
Security tokens and magic-link tokens.

generate_token() produces verification/session style tokens in ``alnum``
or ``hex`` format, optionally bound to an action label through a nonce.
generate_magic_token() produces a TokenRecord carrying its own expiry.

Both prefer the secure random source. The degraded paths, used only when
the secure source reports itself unavailable, are logged as warnings.
"""

from __future__ import annotations

import math
from typing import Optional

from config import get_settings
from dependencies import get_nonce_provider
from errors import InvalidFormatError, InvalidRangeError, SecureSourceUnavailable
from infrastructure.nonce.protocol import NonceProvider
from schemas.models.token_record import TokenRecord
from shared.crypto import derive_hex
from shared.datetime_utils import format_utc, unix_now
from shared.generators import generate_string
from shared.logging import get_logger
from shared.random_source import RandomSource, SecureRandomSource, weak_source

log = get_logger(__name__)

TOKEN_FORMATS = ("alnum", "hex")
MIN_TOKEN_LENGTH = 8

_secure_only = SecureRandomSource()


def _secure_bytes(n: int, source: Optional[RandomSource]) -> bytes:
    # Secure tier only; each caller below owns its degraded path.
    if source is None:
        source = _secure_only
    return source.token_bytes(n)


def generate_token(
    length: int = 32,
    binding_key: Optional[str] = None,
    format: str = "alnum",
    *,
    source: Optional[RandomSource] = None,
    nonce_provider: Optional[NonceProvider] = None,
    secret: Optional[str] = None,
) -> str:
    """Generate a security token.

    Args:
        length: Token length in characters, at least 8.
        binding_key: Action label to bind the token to (``alnum`` only).
        format: ``alnum`` or ``hex``.
        source: Random source override.
        nonce_provider: Nonce provider override for bound tokens.
        secret: Secret override; defaults to the configured secret key.

    Returns:
        A token of exactly *length* characters. Hex and bound tokens are
        lowercase hex.

    Raises:
        InvalidRangeError: If *length* is below 8.
        InvalidFormatError: If *format* is not supported.
    """
    if length < MIN_TOKEN_LENGTH:
        raise InvalidRangeError(
            f"Token length must be at least {MIN_TOKEN_LENGTH}, got {length}",
            field="length",
        )
    if format not in TOKEN_FORMATS:
        raise InvalidFormatError(
            f"Unsupported token format {format!r}",
            field="format",
            details={"allowed": list(TOKEN_FORMATS)},
        )
    if secret is None:
        secret = get_settings().secret_key

    if format == "hex":
        try:
            return _secure_bytes(math.ceil(length / 2), source).hex()[:length]
        except SecureSourceUnavailable:
            log.warning("token_degraded_fallback", kind="hex", length=length)
            password = generate_string(length, "alnum", secure=False)
            return derive_hex(password, secret, length)

    random_part = generate_string(length, "alnum", source=source)
    if not binding_key:
        return random_part

    if nonce_provider is None:
        nonce_provider = get_nonce_provider()
    nonce = nonce_provider.create_binding(binding_key)
    raw = f"{random_part}|{nonce}|{unix_now()}"
    return derive_hex(raw, secret, length)


def generate_magic_token(
    expires_in: Optional[int] = None,
    context: str = "",
    length: int = 32,
    *,
    source: Optional[RandomSource] = None,
) -> TokenRecord:
    """Generate a magic-link token with expiration metadata.

    Args:
        expires_in: Seconds until expiration; defaults to the configured
            magic-token TTL (one day).
        context: Free-form purpose label (``login``, ``reset``, ...),
            passed through unchanged.
        length: Random bytes to draw; the token has ``2 * length`` hex
            characters.

    Returns:
        A TokenRecord. The caller is responsible for persisting it.
    """
    if expires_in is None:
        expires_in = get_settings().tokens.magic_token_ttl_seconds
    if expires_in < 0:
        raise InvalidRangeError(
            f"expires_in must not be negative, got {expires_in}", field="expires_in"
        )
    if length < 1:
        raise InvalidRangeError(
            f"Token length must be at least 1, got {length}", field="length"
        )

    try:
        token = _secure_bytes(length, source).hex()
    except SecureSourceUnavailable:
        log.warning("token_degraded_fallback", kind="magic", length=length)
        token = generate_string(length * 2, "alnum", source=weak_source())

    expires_at = unix_now() + expires_in
    log.info("magic_token_issued", context=context, expires_at=expires_at)

    return TokenRecord(
        token=token,
        expires=format_utc(expires_at),
        expires_at=expires_at,
        context=context,
    )
