"""
Calendar helpers shared by validation and the user model.
"""
from datetime import date, datetime
from typing import Any, Optional


MIN_AGE = 18


def parse_date(value: Any) -> Optional[date]:
    """
    Coerce a date, datetime or ISO-8601 string into a date.

    Returns None when the value cannot be interpreted as a calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            return None
    return None


def calculate_age(date_of_birth: date, today: Optional[date] = None) -> int:
    """Age in whole years, decremented when this year's birthday is still ahead."""
    today = today or date.today()
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


def is_adult(date_of_birth: date, today: Optional[date] = None) -> bool:
    return calculate_age(date_of_birth, today) >= MIN_AGE


def to_datetime(value: date) -> datetime:
    """BSON has no date type; dates are stored as midnight datetimes."""
    return datetime(value.year, value.month, value.day)
