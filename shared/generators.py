"""
Random string, code and identifier generators.

Every generator draws characters through a RandomSource: the secure tiered
source by default, the weak source when the caller passes ``secure=False``,
or any source handed in via ``source=`` (tests inject seeded ones).
"""

from __future__ import annotations

import uuid
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from errors import InvalidRangeError, ValidationError
from schemas.models.code_options import CodeOptions
from shared.charsets import (
    LOWERCASE,
    DIGITS,
    SHORT_ID_ALPHABET,
    build_charset,
    resolve_charset,
)
from shared.logging import get_logger, should_sample
from shared.random_source import RandomSource, default_source, weak_source

log = get_logger(__name__)

_KEY_ALPHABET = DIGITS + LOWERCASE


def _draw(chars: str, length: int, source: RandomSource) -> str:
    n = len(chars)
    return "".join(chars[source.uniform(n)] for _ in range(length))


def generate_string(
    length: int = 16,
    charset: str = "alnum",
    secure: bool = True,
    *,
    source: Optional[RandomSource] = None,
) -> str:
    """Generate a random string.

    Args:
        length: Number of characters, at least 1.
        charset: ``alnum``, ``alpha``, ``numeric``, ``hex`` or a literal
            alphabet.
        secure: Draw from the secure source (with fallback). ``False`` skips
            straight to the faster non-cryptographic source.
        source: Explicit source, overriding *secure*.

    Returns:
        *length* characters, each drawn independently from the charset.

    Raises:
        InvalidRangeError: If *length* is below 1.
        EmptyCharsetError: If *charset* is empty.
    """
    if length < 1:
        raise InvalidRangeError(
            f"String length must be at least 1, got {length}", field="length"
        )
    chars = resolve_charset(charset)
    if source is None:
        source = default_source() if secure else weak_source()
    return _draw(chars, length, source)


def generate_code(
    options: Optional[CodeOptions] = None,
    *,
    source: Optional[RandomSource] = None,
    **overrides,
) -> str:
    """Generate a code such as a coupon code or license key.

    Args:
        options: Code options; defaults to ``CodeOptions()``.
        source: Random source override.
        **overrides: Field overrides applied on top of *options*, e.g.
            ``generate_code(segments=4, separator="-")``.

    Raises:
        EmptyCharsetError: If the exclusions leave no characters.
        InvalidRangeError: If an override sets a non-positive length.
        ValidationError: If an override has the wrong type.
    """
    try:
        if options is None:
            options = CodeOptions(**overrides)
        elif overrides:
            options = CodeOptions(**{**options.model_dump(), **overrides})
    except PydanticValidationError as e:
        fields = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        raise ValidationError(
            "Invalid code options",
            field=fields[0] if fields else None,
            details={"fields": fields},
        ) from e

    chars = build_charset(options.uppercase, options.numbers, options.exclude)
    if source is None:
        source = default_source()

    segments = [_draw(chars, options.length, source) for _ in range(options.segments)]
    code = options.prefix + options.separator.join(segments) + options.suffix

    if should_sample("generation"):
        log.debug(
            "code_generated",
            segments=options.segments,
            length=options.length,
            charset_size=len(chars),
        )
    return code


def generate_key(
    prefix: str = "id", length: int = 9, *, source: Optional[RandomSource] = None
) -> str:
    """Generate a prefixed key like ``id_k3j9x0q2m``.

    An empty *prefix* falls back to ``id``.
    """
    prefix = prefix or "id"
    return f"{prefix}_{generate_string(length, _KEY_ALPHABET, source=source)}"


def generate_short_id(
    length: int = 7, *, source: Optional[RandomSource] = None
) -> str:
    """Generate a URL-safe short ID without look-alike characters."""
    return generate_string(length, SHORT_ID_ALPHABET, source=source)


def generate_uuid(*, source: Optional[RandomSource] = None) -> str:
    """Generate an RFC 4122 version 4 UUID string."""
    if source is None:
        source = default_source()
    return str(uuid.UUID(bytes=source.token_bytes(16), version=4))
