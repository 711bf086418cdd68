"""
Error hierarchy for the generation toolkit.

AppError is the base for all typed errors. Malformed input (empty charsets,
non-positive lengths, unknown formats) surfaces as a ValidationError
subclass and is never recovered. SecureSourceUnavailable is an internal
signal consumed by the tiered random source; it only reaches callers when
the fallback source fails as well. StorageError wraps backing-store
failures and is propagated without retry.
"""

from __future__ import annotations

from typing import Any, Optional


class AppError(Exception):
    """Base application error. All typed errors inherit from this."""

    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.details = details

    def to_dict(self) -> dict:
        payload: dict = {"error": self.message, "code": self.error_code}
        if self.field is not None:
            payload["field"] = self.field
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationError(AppError):
    status_code = 400
    error_code = "validation_error"


class InvalidRangeError(ValidationError):
    error_code = "invalid_range"


class EmptyCharsetError(ValidationError):
    error_code = "empty_charset"


class InvalidFormatError(ValidationError):
    error_code = "invalid_format"


class SecureSourceUnavailable(AppError):
    status_code = 503
    error_code = "secure_source_unavailable"


class StorageError(AppError):
    status_code = 503
    error_code = "storage_error"
