"""
Pydantic models for database documents.
"""
from user_registry.models.user import Counter, Gender, User

__all__ = [
    "Counter",
    "Gender",
    "User",
]
