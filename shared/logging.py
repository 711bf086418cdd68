"""
Centralized structured logging for the generation toolkit.

This module sets up structured logging with:
- Settings-based configuration (dev vs production)
- JSON formatting for production, pretty console for development
- Redaction of token and secret values
- Sampling for high-frequency generation events

Nothing is configured on import; applications call setup_logging() once at
startup. Until then structlog's defaults apply, which is what library
consumers and the test suite see.
"""

from __future__ import annotations

import logging
import random
import sys
from datetime import datetime, timezone
from typing import Optional

import structlog
from structlog.stdlib import BoundLogger
from structlog.types import EventDict, Processor

from config import LoggingSettings

# Sampling rates for high-frequency events, refreshed by setup_logging()
SAMPLING_RATES = {
    "generation": 0.01,
}

# Sensitive fields to redact from logs
REDACTED_FIELDS = {
    "token",
    "secret",
    "secret_key",
    "nonce",
    "binding",
    "password",
}

_PROTECTED_KEYS = {"level", "event", "timestamp", "logger"}


def get_logger(name: str) -> BoundLogger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        structlog BoundLogger instance

    Example:
        >>> log = get_logger(__name__)
        >>> log.info("sequence_issued", context="invoices", value=1000)
    """
    return structlog.get_logger(name)


def should_sample(event_type: str) -> bool:
    """
    Determine if an event should be logged based on its sampling rate.

    Event types without a configured rate are always logged.
    """
    sample_rate = SAMPLING_RATES.get(event_type, 1.0)

    if sample_rate >= 1.0:
        return True

    if sample_rate <= 0.0:
        return False

    return random.random() < sample_rate


def add_timestamp(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add ISO format UTC timestamp to event dict."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def redact_sensitive_fields(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Redact token, nonce and secret values from logs."""
    for key in list(event_dict.keys()):
        if key in _PROTECTED_KEYS:
            continue
        lowered = key.lower()
        if lowered in REDACTED_FIELDS or any(
            sensitive in lowered for sensitive in ("token", "secret", "nonce")
        ):
            event_dict[key] = "***REDACTED***"
    return event_dict


def configure_structlog(settings: LoggingSettings) -> None:
    """
    Configure structlog with appropriate processors for the log format.

    json: one JSON object per line
    console: pretty console formatting with colors
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_timestamp,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        redact_sensitive_fields,
        structlog.processors.format_exc_info,
    ]

    if settings.log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            pad_event=15,
            sort_keys=False,
        )

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_stdlib_logging(settings: LoggingSettings) -> None:
    """Route stdlib logging to stdout at the configured level."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
    )

    # Driver chatter
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("redis").setLevel(logging.WARNING)


def setup_logging(settings: Optional[LoggingSettings] = None) -> None:
    """
    Initialize logging for the application.

    Should be called early in application startup.
    """
    if settings is None:
        settings = LoggingSettings()

    SAMPLING_RATES["generation"] = settings.sample_rate_generation

    configure_stdlib_logging(settings)
    configure_structlog(settings)

    get_logger(__name__).info(
        "logging_initialized",
        log_level=settings.log_level,
        log_format=settings.log_format,
    )


__all__ = [
    "get_logger",
    "should_sample",
    "SAMPLING_RATES",
    "configure_structlog",
    "setup_logging",
]
