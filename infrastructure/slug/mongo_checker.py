"""MongoDB slug checker.

Looks for a document whose slug field equals the candidate. When a type
field is configured the lookup is scoped to documents of that type (post
type, taxonomy); otherwise the type argument is ignored.
"""

from typing import Optional

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from errors import StorageError
from shared.logging import get_logger

log = get_logger(__name__)


class MongoSlugChecker:
    def __init__(
        self,
        collection: Collection,
        slug_field: str = "slug",
        type_field: Optional[str] = "type",
    ) -> None:
        self._collection = collection
        self.slug_field = slug_field
        self.type_field = type_field

    def exists(self, candidate: str, type_: str) -> bool:
        query = {self.slug_field: candidate}
        if self.type_field:
            query[self.type_field] = type_
        try:
            return self._collection.find_one(query, {"_id": 1}) is not None
        except PyMongoError as e:
            log.error(
                "slug_lookup_failed",
                collection=self._collection.name,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise StorageError("Slug lookup failed", field="slug") from e
