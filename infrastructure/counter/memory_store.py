"""In-process counter store.

Backs tests and single-process deployments without Redis or MongoDB.
Values live for the lifetime of the instance.
"""

import threading
from typing import Optional


class InMemoryCounterStore:
    def __init__(self) -> None:
        self._values: dict[str, int] = {}
        self._lock = threading.Lock()

    def atomic_increment(self, context: str, start: int) -> int:
        with self._lock:
            current = self._values.get(context, start)
            self._values[context] = current + 1
            return current

    def peek(self, context: str) -> Optional[int]:
        """Return the next value *context* would hand out, if any."""
        with self._lock:
            return self._values.get(context)
