"""
Users database configuration.
Stores user registration records and the sequences that number them.
"""

DB_NAME = "users_db"


class Collections:
    """Collection names in users_db."""
    USERS = "users"
    COUNTERS = "counters"

    # Index definitions for each collection
    INDEXES = {
        "users": [
            {"keys": [("email", 1)], "unique": True},
            {"keys": [("display_id", 1)], "unique": True},
        ],
        "counters": [
            {"keys": [("name", 1)], "unique": True},
        ],
    }


# Sequence that numbers users
USER_ID_SEQUENCE = "userId"
