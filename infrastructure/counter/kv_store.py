"""Counter store over a plain get/set key-value backend.

This is the read-then-write contract of settings tables and option stores.
The pair is serialised with a process-local lock only: two processes
sharing the backend can still read the same value and hand out duplicates.
Use RedisCounterStore or MongoCounterStore when more than one process
issues sequence values.
"""

import threading

from errors import StorageError
from infrastructure.counter.protocol import KeyValueStore
from shared.logging import get_logger

log = get_logger(__name__)


class KeyValueCounterStore:
    def __init__(self, backend: KeyValueStore) -> None:
        self._backend = backend
        self._lock = threading.Lock()

    def atomic_increment(self, context: str, start: int) -> int:
        with self._lock:
            try:
                raw = self._backend.get(context)
                # option tables hand values back as strings
                current = start if raw is None else int(raw)
                self._backend.set(context, current + 1)
            except StorageError:
                raise
            except Exception as e:
                log.error(
                    "counter_store_error",
                    store="kv",
                    context=context,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise StorageError(
                    "Counter backend read/write failed", details={"context": context}
                ) from e
            return current
