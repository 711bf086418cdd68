"""Redis-backed counter store.

The key holds the *next* value to hand out. ``SET key start NX`` seeds a
new context and ``INCR`` claims a value; both run in one MULTI/EXEC
pipeline, so the value returned is ``INCR result - 1``.
"""

import redis
from redis.exceptions import RedisError

from errors import StorageError
from shared.logging import get_logger

log = get_logger(__name__)


class RedisCounterStore:
    def __init__(self, redis_client: redis.Redis) -> None:
        self._redis = redis_client

    def atomic_increment(self, context: str, start: int) -> int:
        try:
            pipe = self._redis.pipeline(transaction=True)
            pipe.set(context, start, nx=True)
            pipe.incr(context)
            _, incremented = pipe.execute()
        except RedisError as e:
            log.error(
                "counter_store_error",
                store="redis",
                context=context,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise StorageError(
                "Redis counter increment failed", details={"context": context}
            ) from e
        return int(incremented) - 1
