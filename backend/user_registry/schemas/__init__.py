"""
Request and response schemas for API endpoints.
"""
from user_registry.schemas.user import (
    ErrorResponse,
    UserCreate,
    UserDeletedResponse,
    UserDetailResponse,
    UserListResponse,
    UserRegistered,
    UserRegisteredResponse,
    UserSnapshot,
    UserSummary,
    UserUpdate,
    UserUpdatedResponse,
)

__all__ = [
    # Requests
    "UserCreate",
    "UserUpdate",
    # Payloads
    "UserRegistered",
    "UserSnapshot",
    "UserSummary",
    # Envelopes
    "UserRegisteredResponse",
    "UserListResponse",
    "UserDetailResponse",
    "UserUpdatedResponse",
    "UserDeletedResponse",
    "ErrorResponse",
]
