"""
Database definitions and collection constants.
"""
from user_registry.database.databases import users_db

__all__ = ["users_db"]
