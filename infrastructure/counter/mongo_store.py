"""MongoDB-backed counter store.

One document per context: ``{_id: context, start: <first value>, n: <values
issued>}``. ``$inc`` on ``n`` with an upsert is atomic per document, and
``$setOnInsert`` fixes ``start`` when the document is created, so the value
claimed by a call is ``start + n - 1``.
"""

from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from errors import StorageError
from shared.logging import get_logger

log = get_logger(__name__)


class MongoCounterStore:
    def __init__(self, collection: Collection) -> None:
        self._collection = collection

    def atomic_increment(self, context: str, start: int) -> int:
        try:
            doc = self._collection.find_one_and_update(
                {"_id": context},
                {"$inc": {"n": 1}, "$setOnInsert": {"start": start}},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            log.error(
                "counter_store_error",
                store="mongo",
                context=context,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise StorageError(
                "MongoDB counter increment failed", details={"context": context}
            ) from e
        return int(doc["start"]) + int(doc["n"]) - 1
