"""
Sequence counter service.

Hands out sequential integers from named counter documents. The value is
never cached in process memory: every call is a single atomic
find-and-increment on the database, so concurrent callers (in this process
or in other workers) can never receive the same value.
"""
import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError as PyMongoDuplicateKeyError
from pymongo.errors import PyMongoError

from user_registry.core.errors import StorageError
from user_registry.database.databases import users_db
from user_registry.models.user import Counter

logger = logging.getLogger(__name__)


class CounterService:
    """Service owning the counters collection."""

    def __init__(self, db: AsyncIOMotorDatabase):
        """Initialize with users database."""
        self.db = db
        self.counters = db[users_db.Collections.COUNTERS]

    async def next_value(self, counter_name: str) -> int:
        """
        Increment the named counter and return its new value.

        The counter document is created on first use. Two first-time upserts
        racing each other can collide on the unique ``name`` index; the loser
        retries once, at which point the document exists and ``$inc`` applies.

        Raises:
            StorageError: If the database fails
        """
        for _ in range(2):
            try:
                doc = await self.counters.find_one_and_update(
                    {"name": counter_name},
                    {"$inc": {"seq": 1}},
                    upsert=True,
                    return_document=ReturnDocument.AFTER,
                )
                return Counter.model_validate(doc).seq
            except PyMongoDuplicateKeyError:
                logger.debug("Counter %s upsert raced, retrying", counter_name)
            except PyMongoError as e:
                raise StorageError(f"Counter '{counter_name}' increment failed") from e

        raise StorageError(f"Could not create counter '{counter_name}'")

    async def current_value(self, counter_name: str) -> int:
        """Last value handed out, 0 if the counter was never used."""
        doc = await self.counters.find_one({"name": counter_name})
        if not doc:
            return 0
        return Counter.model_validate(doc).seq
