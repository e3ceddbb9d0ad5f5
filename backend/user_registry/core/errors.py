"""
Domain errors raised by the service layer.

Routers never inspect driver errors: the store translates them into one of
these classes and the app's exception handlers turn them into responses.
"""
from pydantic import BaseModel


class FieldError(BaseModel):
    """A single field violation."""
    field: str
    message: str


class UserRegistryError(Exception):
    """Base class for all user registry errors."""


class ValidationError(UserRegistryError):
    """One or more fields failed validation."""

    def __init__(self, errors: list[FieldError]):
        self.errors = list(errors)
        fields = ", ".join(e.field for e in self.errors)
        super().__init__(f"Validation failed for: {fields}")


class DuplicateKeyError(UserRegistryError):
    """A unique index rejected the write."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{field} already exists")


class NotFound(UserRegistryError):
    """No user exists for the given display id."""

    def __init__(self, display_id: int):
        self.display_id = display_id
        super().__init__(f"User with ID {display_id} not found")


class BadRequest(UserRegistryError):
    """Malformed query parameters."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class StorageError(UserRegistryError):
    """The database failed; details are logged, never returned."""
