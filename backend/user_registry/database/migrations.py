"""
Startup migrations.
Creates the unique indexes the stores rely on. Safe to run on every start.
"""
import logging

from motor.motor_asyncio import AsyncIOMotorDatabase

from user_registry.database.databases import users_db

logger = logging.getLogger(__name__)


async def create_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create indexes for all users_db collections."""
    for collection_name, indexes in users_db.Collections.INDEXES.items():
        collection = db[collection_name]
        for index_def in indexes:
            keys = index_def["keys"]
            kwargs = {k: v for k, v in index_def.items() if k != "keys"}
            name = await collection.create_index(keys, **kwargs)
            logger.debug("Ensured index %s on %s", name, collection_name)


async def run_migrations(db: AsyncIOMotorDatabase) -> int:
    """
    Run all startup migrations.

    Returns:
        Number of users currently stored
    """
    logger.info("Running migrations...")

    await create_indexes(db)

    count = await db[users_db.Collections.USERS].count_documents({})
    if count == 0:
        logger.info("No users registered in the database yet")
    else:
        logger.info("Found %d registered users", count)

    logger.info("Migrations complete")
    return count
