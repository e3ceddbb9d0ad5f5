"""
User and counter document models for the users database.
"""
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from user_registry.core.dates import calculate_age, parse_date


class Gender(str, Enum):
    """Accepted gender values."""
    MALE = "male"
    FEMALE = "female"


class User(BaseModel):
    """
    User document model for MongoDB users_db.users collection.

    ``display_id`` is the sequential id shown to API clients; ``_id`` is the
    storage identifier and never leaves the service.
    """
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    id: Optional[str] = Field(None, alias="_id", description="MongoDB ObjectId as string")
    display_id: int = Field(..., description="Sequential public identifier")
    first_name: str = Field(..., description="First name")
    middle_name: str = Field(..., description="Middle name")
    last_name: str = Field(..., description="Last name")
    user_name: Optional[str] = Field(None, description="Optional alphanumeric handle")
    email: str = Field(..., description="Unique lowercase email address")
    date_of_birth: date = Field(..., description="Date of birth")
    gender: Gender = Field(..., description="Gender")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_object_id(cls, value: Any) -> Any:
        return str(value) if value is not None else None

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def _strip_time(cls, value: Any) -> Any:
        # Stored as a midnight datetime
        return parse_date(value) or value

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.middle_name} {self.last_name}"

    def age(self, today: Optional[date] = None) -> int:
        """Derived at read time, never stored."""
        return calculate_age(self.date_of_birth, today)

    @classmethod
    def from_document(cls, doc: dict) -> "User":
        return cls.model_validate(doc)


class Counter(BaseModel):
    """Named sequence document in users_db.counters."""
    name: str = Field(..., description="Sequence name")
    seq: int = Field(0, description="Last value handed out")
