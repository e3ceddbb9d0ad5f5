"""
Service layer for business logic.
"""
from user_registry.services.counter_service import CounterService
from user_registry.services.user_service import UserService

__all__ = [
    "CounterService",
    "UserService",
]
