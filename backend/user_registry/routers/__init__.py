"""
API Routers module.
"""
from user_registry.routers import health, users

__all__ = ["health", "users"]
