"""
User request/response schemas.

Request bodies are deliberately loose (every field optional, plain strings):
the validation engine reports missing and malformed fields itself so that all
violations come back together in one 400 response.
"""
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field

from user_registry.core.errors import FieldError
from user_registry.models.user import User


# ==================== Requests ====================


class UserCreate(BaseModel):
    """Registration request body."""
    first_name: Optional[str] = Field(None, description="First name (2-12 characters)", examples=["Ann"])
    middle_name: Optional[str] = Field(None, description="Middle name (2-12 characters)", examples=["Marie"])
    last_name: Optional[str] = Field(None, description="Last name (2-30 characters)", examples=["Smith"])
    email: Optional[str] = Field(None, description="Unique email address", examples=["ann@example.com"])
    gender: Optional[str] = Field(None, description="male or female", examples=["female"])
    date_of_birth: Optional[str] = Field(
        None, description="ISO date, user must be at least 18", examples=["1990-05-17"]
    )
    user_name: Optional[str] = Field(
        None, description="Optional alphanumeric handle (max 12 characters)", examples=["annsmith"]
    )


class UserUpdate(UserCreate):
    """
    Partial update request body.

    Only the fields actually sent are applied. An empty string or an explicit
    null is an intentional change; an absent field is left unchanged.
    """

    def changes(self) -> dict:
        """Fields explicitly present in the request."""
        return self.model_dump(exclude_unset=True)


# ==================== Payloads ====================


class UserSummary(BaseModel):
    """Public view of a user, with derived full name and age."""
    id: int = Field(..., description="Sequential user ID")
    full_name: str = Field(..., description="First, middle and last name")
    age: int = Field(..., description="Age in years, computed at read time")
    date_of_birth: date = Field(..., description="Date of birth")
    gender: str = Field(..., description="Gender")
    email: str = Field(..., description="Email address")
    user_name: Optional[str] = Field(None, description="Username")

    @classmethod
    def from_user(cls, user: User, today: Optional[date] = None) -> "UserSummary":
        return cls(
            id=user.display_id,
            full_name=user.full_name,
            age=user.age(today),
            date_of_birth=user.date_of_birth,
            gender=user.gender,
            email=user.email,
            user_name=user.user_name,
        )


class UserRegistered(BaseModel):
    """Payload returned after a successful registration."""
    id: int = Field(..., description="Sequential user ID")
    full_name: str
    age: int
    date_of_birth: date
    gender: str
    email: str
    message: str = Field(..., description="Greeting for the new user")

    @classmethod
    def from_user(cls, user: User, today: Optional[date] = None) -> "UserRegistered":
        age = user.age(today)
        message = (
            f"Hello Users with ID {user.display_id} and name {user.full_name} "
            f"(age {age}, DOB {user.date_of_birth.isoformat()}, {user.gender}, "
            f"email: {user.email}). Thanks for registration, we will contact you soon."
        )
        return cls(
            id=user.display_id,
            full_name=user.full_name,
            age=age,
            date_of_birth=user.date_of_birth,
            gender=user.gender,
            email=user.email,
            message=message,
        )


class UserSnapshot(BaseModel):
    """Stored field values of a user, used to report updates."""
    id: int
    first_name: str
    middle_name: str
    last_name: str
    email: str
    gender: str
    date_of_birth: date
    user_name: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "UserSnapshot":
        return cls(
            id=user.display_id,
            first_name=user.first_name,
            middle_name=user.middle_name,
            last_name=user.last_name,
            email=user.email,
            gender=user.gender,
            date_of_birth=user.date_of_birth,
            user_name=user.user_name,
        )


# ==================== Envelopes ====================


class UserRegisteredResponse(BaseModel):
    success: bool = True
    data: UserRegistered


class UserListResponse(BaseModel):
    success: bool = True
    count: int = Field(..., description="Number of users in data")
    data: list[UserSummary]


class UserDetailResponse(BaseModel):
    success: bool = True
    data: UserSummary


class UserUpdatedResponse(BaseModel):
    success: bool = True
    old_data: UserSnapshot = Field(..., description="Values before the update")
    updated_data: UserSnapshot = Field(..., description="Values after the update")


class UserDeletedResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Error envelope shared by every failure response."""
    success: bool = False
    message: str
    errors: Optional[list[FieldError]] = None
