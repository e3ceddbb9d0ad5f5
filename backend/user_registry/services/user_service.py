"""
User service for registration record management.
"""
import logging
import re
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError as PyMongoDuplicateKeyError
from pymongo.errors import PyMongoError

from user_registry.core.dates import to_datetime
from user_registry.core.errors import (
    BadRequest,
    DuplicateKeyError,
    NotFound,
    StorageError,
    ValidationError,
)
from user_registry.core.validation import normalize_user, validate_user
from user_registry.database.databases import users_db
from user_registry.models.user import User
from user_registry.services.counter_service import CounterService

logger = logging.getLogger(__name__)

USER_FIELDS = (
    "first_name",
    "middle_name",
    "last_name",
    "user_name",
    "email",
    "date_of_birth",
    "gender",
)
NAME_FIELDS = ("first_name", "middle_name", "last_name")
UNIQUE_FIELDS = ("email", "display_id")

# "E11000 duplicate key error collection: users_db.users index: email_1 dup key: ..."
_INDEX_NAME = re.compile(r"index: (\w+?)_-?1\b")


@contextmanager
def _storage_errors(operation: str):
    """Translate driver failures into StorageError."""
    try:
        yield
    except PyMongoError as e:
        raise StorageError(f"{operation} failed: {e}") from e


class UserService:
    """Service owning the users collection."""

    def __init__(self, db: AsyncIOMotorDatabase, counter_service: Optional[CounterService] = None):
        """Initialize with users database and the counter service numbering users."""
        self.db = db
        self.users = db[users_db.Collections.USERS]
        self.counter_service = counter_service or CounterService(db)

    # ==================== Writes ====================

    async def create(self, data: dict[str, Any]) -> User:
        """
        Validate and persist a new user.

        The display id is allocated only after validation passes, so rejected
        input never consumes a counter value.

        Args:
            data: Candidate fields keyed by document field names

        Returns:
            The stored user

        Raises:
            ValidationError: If any field violates its rule
            DuplicateKeyError: If email or display id is already taken
            StorageError: If the database fails
        """
        normalized = normalize_user({field: data.get(field) for field in USER_FIELDS})
        result = validate_user(normalized)
        if not result.valid:
            raise ValidationError(result.errors)

        display_id = await self.counter_service.next_value(users_db.USER_ID_SEQUENCE)

        now = datetime.now(timezone.utc)
        user_doc = {
            "display_id": display_id,
            "first_name": normalized["first_name"],
            "middle_name": normalized["middle_name"],
            "last_name": normalized["last_name"],
            "user_name": normalized.get("user_name"),
            "email": normalized["email"],
            "date_of_birth": to_datetime(normalized["date_of_birth"]),
            "gender": normalized["gender"],
            "created_at": now,
            "updated_at": now,
        }

        with _storage_errors("Create user"):
            try:
                inserted = await self.users.insert_one(user_doc)
            except PyMongoDuplicateKeyError as e:
                field = await self._conflicting_field(e, user_doc)
                logger.info("Rejected user creation: duplicate %s", field)
                raise DuplicateKeyError(field) from e

        user_doc["_id"] = inserted.inserted_id
        logger.info("Created user %d (%s)", display_id, user_doc["email"])
        return User.from_document(user_doc)

    async def update(self, display_id: int, changes: dict[str, Any]) -> tuple[User, User]:
        """
        Apply a partial update.

        Only keys present in ``changes`` are applied, whatever their value.
        The merged record is re-validated as a whole before it is written.

        Returns:
            (user before the update, user after the update)

        Raises:
            NotFound: If no user has this display id
            ValidationError: If the merged record is invalid
            DuplicateKeyError: If the new email is already taken
        """
        with _storage_errors("Load user"):
            existing = await self.users.find_one({"display_id": display_id})
        if not existing:
            raise NotFound(display_id)

        old_user = User.from_document(existing)
        applied = {k: v for k, v in changes.items() if k in USER_FIELDS}

        merged = {field: existing.get(field) for field in USER_FIELDS}
        merged.update(applied)
        normalized = normalize_user(merged)
        result = validate_user(normalized)
        if not result.valid:
            raise ValidationError(result.errors)

        update_data = {field: normalized[field] for field in applied}
        if "date_of_birth" in update_data:
            update_data["date_of_birth"] = to_datetime(update_data["date_of_birth"])
        update_data["updated_at"] = datetime.now(timezone.utc)

        with _storage_errors("Update user"):
            try:
                updated = await self.users.find_one_and_update(
                    {"_id": existing["_id"]},
                    {"$set": update_data},
                    return_document=ReturnDocument.AFTER,
                )
            except PyMongoDuplicateKeyError as e:
                field = await self._conflicting_field(e, {**existing, **update_data})
                logger.info("Rejected update of user %d: duplicate %s", display_id, field)
                raise DuplicateKeyError(field) from e

        # Deleted between the read and the write
        if updated is None:
            raise NotFound(display_id)

        logger.info("Updated user %d (%s)", display_id, ", ".join(applied) or "no fields")
        return old_user, User.from_document(updated)

    async def delete_by_id(self, display_id: int) -> int:
        """
        Remove a user permanently.

        Returns:
            The display id removed

        Raises:
            NotFound: If no user has this display id
        """
        with _storage_errors("Delete user"):
            deleted = await self.users.find_one_and_delete({"display_id": display_id})

        if not deleted:
            raise NotFound(display_id)

        logger.info("Deleted user %d", display_id)
        return display_id

    # ==================== Reads ====================

    async def find_all(self) -> list[User]:
        """All users in natural (insertion) order."""
        with _storage_errors("List users"):
            cursor = self.users.find({})
            docs = await cursor.to_list(length=None)
        return [User.from_document(doc) for doc in docs]

    async def find_by_id(self, display_id: int) -> User:
        """
        Get a user by display id.

        Raises:
            NotFound: If no user has this display id
        """
        with _storage_errors("Get user"):
            doc = await self.users.find_one({"display_id": display_id})

        if not doc:
            raise NotFound(display_id)

        return User.from_document(doc)

    async def search_by_name(self, full_name: Optional[str]) -> list[User]:
        """
        Find users whose first, middle or last name contains any query token.

        Matching is case-insensitive and unanchored; a user matching several
        tokens is returned once.

        Raises:
            BadRequest: If the query is missing or blank
        """
        if full_name is None or not full_name.strip():
            raise BadRequest("Please provide a full_name query parameter.")

        tokens = full_name.split()
        query = {
            "$or": [
                {field: {"$regex": re.escape(token), "$options": "i"}}
                for token in tokens
                for field in NAME_FIELDS
            ]
        }

        with _storage_errors("Search users"):
            cursor = self.users.find(query)
            docs = await cursor.to_list(length=None)
        return [User.from_document(doc) for doc in docs]

    # ==================== Helpers ====================

    async def _conflicting_field(self, error: PyMongoDuplicateKeyError, doc: dict) -> str:
        """
        Name the unique field a duplicate-key error was raised for.

        Uses the server's keyValue/keyPattern details when present, then the
        index name in the message, and finally looks for another document
        holding one of the unique values.
        """
        details = error.details or {}
        keys = details.get("keyValue") or details.get("keyPattern")
        if keys:
            return next(iter(keys))

        match = _INDEX_NAME.search(str(error))
        if match:
            return match.group(1)

        for field in UNIQUE_FIELDS:
            if field not in doc:
                continue
            query: dict[str, Any] = {field: doc[field]}
            if "_id" in doc:
                query["_id"] = {"$ne": doc["_id"]}
            if await self.users.find_one(query):
                return field

        return "key"
