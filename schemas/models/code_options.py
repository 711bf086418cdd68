"""
Code generation options.

CodeOptions is an immutable, fully defaulted value object: construct it
once, it is validated on construction, and generate_code() consumes it.
Invalid numbers raise InvalidRangeError straight out of the constructor.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from errors import InvalidRangeError
from shared.charsets import DEFAULT_CODE_EXCLUDE


class CodeOptions(BaseModel):
    """Options for multi-segment codes such as ``SAVE-K7QM-2ZXP``."""

    model_config = ConfigDict(frozen=True)

    length: int = 4
    segments: int = 1
    separator: str = ""
    uppercase: bool = True
    numbers: bool = True
    exclude: frozenset[str] = DEFAULT_CODE_EXCLUDE
    prefix: str = ""
    suffix: str = ""

    @field_validator("exclude", mode="before")
    @classmethod
    def _split_exclude(cls, v):
        # "0O1I" means the characters 0, O, 1 and I
        if isinstance(v, str):
            return frozenset(v)
        return v

    @field_validator("length", "segments")
    @classmethod
    def _positive(cls, v: int, info) -> int:
        if v < 1:
            raise InvalidRangeError(
                f"{info.field_name} must be at least 1, got {v}",
                field=info.field_name,
            )
        return v

    @property
    def expected_length(self) -> int:
        """Length of every code generated with these options."""
        return (
            len(self.prefix)
            + self.segments * self.length
            + (self.segments - 1) * len(self.separator)
            + len(self.suffix)
        )
