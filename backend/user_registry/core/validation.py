"""
Field validation rules for user records.

Every rule is a pure function returning a FieldError (or None), so each one
can be tested on its own. validate_user() runs all of them and collects every
violation instead of stopping at the first one. Uniqueness is not checked
here: the unique indexes enforce it at write time.
"""
import re
from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, Field

from user_registry.core.dates import MIN_AGE, is_adult, parse_date
from user_registry.core.errors import FieldError
from user_registry.models.user import Gender


USER_NAME_MAX_LENGTH = 12

# field -> (label, min length, max length)
NAME_RULES = {
    "first_name": ("First name", 2, 12),
    "middle_name": ("Middle name", 2, 12),
    "last_name": ("Last name", 2, 30),
}

USER_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9]*$")
EMAIL_PATTERN = re.compile(r"^\S+@\S+\.\S+$")

STRING_FIELDS = ("first_name", "middle_name", "last_name", "user_name", "email", "gender")


class ValidationResult(BaseModel):
    """Outcome of validating a candidate user record."""
    valid: bool = Field(..., description="True when no rule was violated")
    errors: list[FieldError] = Field(default_factory=list, description="Every violation found")


# ==================== Normalization ====================


def normalize_user(data: dict[str, Any]) -> dict[str, Any]:
    """
    Trim string fields, lowercase the email and parse the date of birth.

    Keys absent from ``data`` stay absent. Values that cannot be normalized
    are passed through untouched so validation can report them.
    """
    normalized = dict(data)
    for field in STRING_FIELDS:
        value = normalized.get(field)
        if isinstance(value, str):
            normalized[field] = value.strip()

    email = normalized.get("email")
    if isinstance(email, str):
        normalized["email"] = email.lower()

    if "date_of_birth" in normalized:
        parsed = parse_date(normalized["date_of_birth"])
        if parsed is not None:
            normalized["date_of_birth"] = parsed

    return normalized


# ==================== Field rules ====================


def validate_name(field: str, value: Any) -> Optional[FieldError]:
    """Check a required, length-bounded name field."""
    label, min_length, max_length = NAME_RULES[field]
    if value is None or value == "":
        return FieldError(field=field, message=f"{label} is required")
    if not isinstance(value, str):
        return FieldError(field=field, message=f"{label} must be a string")
    if len(value) < min_length:
        return FieldError(
            field=field, message=f"{label} must be at least {min_length} characters"
        )
    if len(value) > max_length:
        return FieldError(
            field=field, message=f"{label} must not exceed {max_length} characters"
        )
    return None


def validate_user_name(value: Any) -> Optional[FieldError]:
    """Optional alphanumeric handle."""
    if value is None:
        return None
    if not isinstance(value, str):
        return FieldError(field="user_name", message="Username must be a string")
    if len(value) > USER_NAME_MAX_LENGTH:
        return FieldError(
            field="user_name",
            message=f"Username must not exceed {USER_NAME_MAX_LENGTH} characters",
        )
    if not USER_NAME_PATTERN.match(value):
        return FieldError(
            field="user_name", message="Username can only contain letters and numbers"
        )
    return None


def validate_email(value: Any) -> Optional[FieldError]:
    if value is None or value == "":
        return FieldError(field="email", message="Email is required")
    if not isinstance(value, str) or not EMAIL_PATTERN.match(value):
        return FieldError(field="email", message="Please provide a valid email address")
    return None


def validate_date_of_birth(value: Any, today: Optional[date] = None) -> Optional[FieldError]:
    if value is None or value == "":
        return FieldError(field="date_of_birth", message="Date of birth is required")
    date_of_birth = parse_date(value)
    if date_of_birth is None:
        return FieldError(
            field="date_of_birth",
            message="Date of birth must be a valid date (YYYY-MM-DD)",
        )
    if not is_adult(date_of_birth, today):
        return FieldError(
            field="date_of_birth", message=f"User must be at least {MIN_AGE} years old"
        )
    return None


def validate_gender(value: Any) -> Optional[FieldError]:
    if value is None or value == "":
        return FieldError(field="gender", message="Gender is required")
    if not isinstance(value, str) or value not in {g.value for g in Gender}:
        return FieldError(field="gender", message="Gender must be either male or female")
    return None


# ==================== Composite ====================


def validate_user(data: dict[str, Any], today: Optional[date] = None) -> ValidationResult:
    """
    Validate a complete (already normalized) user record.

    Args:
        data: Record keyed by document field names
        today: Reference date for the age check (defaults to today)

    Returns:
        ValidationResult listing every violation, in field order
    """
    checks = [
        validate_name("first_name", data.get("first_name")),
        validate_name("middle_name", data.get("middle_name")),
        validate_name("last_name", data.get("last_name")),
        validate_user_name(data.get("user_name")),
        validate_email(data.get("email")),
        validate_date_of_birth(data.get("date_of_birth"), today),
        validate_gender(data.get("gender")),
    ]
    errors = [error for error in checks if error is not None]
    return ValidationResult(valid=not errors, errors=errors)
