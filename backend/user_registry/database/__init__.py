"""
Database module - MongoDB connection, collection definitions and migrations.
"""
from user_registry.database.connections import (
    get_mongo_client,
    close_connections,
    get_database,
)
from user_registry.database.databases import users_db
from user_registry.database.migrations import create_indexes, run_migrations

__all__ = [
    "get_mongo_client",
    "close_connections",
    "get_database",
    "users_db",
    "create_indexes",
    "run_migrations",
]
