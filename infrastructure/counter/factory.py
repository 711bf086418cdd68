"""Counter store factory.

Picks Redis, then MongoDB, then the in-memory store, depending on which
URIs are configured. Connection failures are raised as StorageError: a
deployment that configured a durable store must not silently fall back to
a per-process one.
"""

import redis
from pymongo import MongoClient
from pymongo.errors import PyMongoError
from redis.exceptions import RedisError

from config import CounterSettings
from errors import StorageError
from infrastructure.counter.memory_store import InMemoryCounterStore
from infrastructure.counter.mongo_store import MongoCounterStore
from infrastructure.counter.protocol import CounterStore
from infrastructure.counter.redis_store import RedisCounterStore
from shared.logging import get_logger

log = get_logger(__name__)


def create_counter_store(settings: CounterSettings) -> CounterStore:
    if settings.redis_uri:
        try:
            client = redis.Redis.from_url(settings.redis_uri)
            client.ping()
        except RedisError as e:
            log.error(
                "redis_connection_failed", error=str(e), error_type=type(e).__name__
            )
            raise StorageError("Could not connect to Redis") from e
        log.info("counter_store_selected", store="redis")
        return RedisCounterStore(client)

    if settings.mongodb_uri:
        try:
            client = MongoClient(settings.mongodb_uri)
            client.admin.command("ping")
        except PyMongoError as e:
            log.error(
                "mongodb_connection_failed", error=str(e), error_type=type(e).__name__
            )
            raise StorageError("Could not connect to MongoDB") from e
        log.info("counter_store_selected", store="mongo")
        return MongoCounterStore(client[settings.db_name][settings.counter_collection])

    log.warning("counter_store_selected", store="memory")
    return InMemoryCounterStore()
