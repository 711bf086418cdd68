"""
Sequential IDs (invoice numbers, order numbers) backed by a CounterStore.

Each sequence context is an independent monotonic series. Uniqueness is
exactly as strong as the store's atomic_increment: the Redis, MongoDB and
in-memory stores hand out every value once across concurrent callers.
"""

from __future__ import annotations

import re
from typing import Optional

from config import CounterSettings
from infrastructure.counter.protocol import CounterStore
from shared.logging import get_logger

log = get_logger(__name__)

_KEY_STRIP_RE = re.compile(r"[^a-z0-9_\-]")

DEFAULT_START = 1000


def sanitize_context(context: str) -> str:
    """Lowercase *context* and drop everything but ``a-z``, ``0-9``, ``_`` and ``-``."""
    return _KEY_STRIP_RE.sub("", context.lower())


class SequenceCounter:
    def __init__(
        self,
        store: CounterStore,
        key_prefix: str = "idkit_seq_",
        default_start: int = DEFAULT_START,
    ) -> None:
        self._store = store
        self.key_prefix = key_prefix
        self.default_start = default_start

    @classmethod
    def from_settings(
        cls, store: CounterStore, settings: CounterSettings
    ) -> "SequenceCounter":
        return cls(
            store,
            key_prefix=settings.counter_key_prefix,
            default_start=settings.sequence_start,
        )

    def _key(self, context: str) -> str:
        return f"{self.key_prefix}{sanitize_context(context)}"

    def next(self, context: str = "default", start: Optional[int] = None) -> int:
        """Claim the next value of *context*.

        Args:
            context: Sequence namespace, e.g. ``invoices``.
            start: First value of a new context; defaults to the configured
                start. Ignored once the context exists.

        Raises:
            StorageError: If the store cannot be read or written.
        """
        if start is None:
            start = self.default_start
        value = self._store.atomic_increment(self._key(context), start)
        log.debug("sequence_issued", context=context, value=value)
        return value

    def sequential_id(
        self,
        prefix: str = "",
        padding: int = 8,
        context: str = "default",
        start: Optional[int] = None,
    ) -> str:
        """Claim the next value and format it, e.g. ``INV-00001000``.

        The value is left-padded with zeros to *padding* digits; longer
        values are not truncated.
        """
        value = str(self.next(context, start)).zfill(padding)
        return f"{prefix}{value}" if prefix else value
