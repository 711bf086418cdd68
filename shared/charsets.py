"""
Character set construction: pure, side-effect-free functions.

Charsets are plain ``str`` values whose order is deterministic for a given
set of inputs, so output is reproducible under a seeded random source.
"""

from __future__ import annotations

import string
from typing import Iterable

from errors import EmptyCharsetError

LOWERCASE = string.ascii_lowercase
UPPERCASE = string.ascii_uppercase
DIGITS = string.digits
HEX_DIGITS = "0123456789abcdef"

PRESETS = {
    "alnum": LOWERCASE + UPPERCASE + DIGITS,
    "alpha": LOWERCASE + UPPERCASE,
    "numeric": DIGITS,
    "hex": HEX_DIGITS,
}

# URL-safe alphabet without the look-alikes 0, O, 1, I and l
SHORT_ID_ALPHABET = "".join(
    c for c in LOWERCASE + UPPERCASE + DIGITS if c not in "0O1Il"
)

DEFAULT_CODE_EXCLUDE = frozenset({"0", "O", "1", "I"})


def build_charset(
    uppercase: bool = True,
    include_digits: bool = True,
    exclude: Iterable[str] = (),
) -> str:
    """Build a single-case letter alphabet, optionally with digits.

    Args:
        uppercase: Use ``A-Z`` when true, ``a-z`` otherwise. Cases are never
            mixed on this path.
        include_digits: Append ``0-9``.
        exclude: Characters to drop. Relative order of the rest is kept.

    Returns:
        The de-duplicated charset.

    Raises:
        EmptyCharsetError: When every candidate character was excluded.
    """
    chars = UPPERCASE if uppercase else LOWERCASE
    if include_digits:
        chars += DIGITS

    excluded = set(exclude)
    charset = "".join(dict.fromkeys(c for c in chars if c not in excluded))
    if not charset:
        raise EmptyCharsetError(
            "Charset is empty after applying exclusions",
            field="exclude",
            details={"uppercase": uppercase, "include_digits": include_digits},
        )
    return charset


def resolve_charset(charset: str) -> str:
    """Return the preset named *charset*, or *charset* itself as a literal.

    Literal alphabets are passed through untouched; a repeated character is
    drawn proportionally more often.

    Raises:
        EmptyCharsetError: When *charset* is the empty string.
    """
    chars = PRESETS.get(charset, charset)
    if not chars:
        raise EmptyCharsetError("Charset must not be empty", field="charset")
    return chars
