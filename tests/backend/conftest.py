"""
Backend-specific test fixtures and configuration.

These fixtures extend the global fixtures with backend-specific helpers
for testing FastAPI routes, services, and database operations.
"""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "backend"))


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def counter_service(mock_users_db):
    """CounterService on the mock database."""
    from user_registry.services.counter_service import CounterService
    return CounterService(mock_users_db)


@pytest_asyncio.fixture
async def user_service(mock_users_db, counter_service):
    """UserService on the mock database."""
    from user_registry.services.user_service import UserService
    return UserService(mock_users_db, counter_service)


@pytest.fixture
def mock_user_service():
    """
    Create a fully mocked UserService.

    All methods are AsyncMock, allowing you to configure return values:

        mock_user_service.find_all.return_value = [...]
    """
    service = MagicMock()
    service.create = AsyncMock()
    service.find_all = AsyncMock()
    service.find_by_id = AsyncMock()
    service.search_by_name = AsyncMock()
    service.update = AsyncMock()
    service.delete_by_id = AsyncMock()
    return service


# =============================================================================
# App Override Helpers
# =============================================================================

@pytest_asyncio.fixture
async def api_client(app, async_client, user_service):
    """
    Async client whose routes use the mock-database UserService.
    """
    from user_registry.routers.users import get_user_service

    async def _service():
        return user_service

    app.dependency_overrides[get_user_service] = _service
    yield async_client


@pytest.fixture
def override_user_service(app):
    """
    Install any object as the UserService used by the routes.

    Usage:
        override_user_service(mock_user_service)
    """
    from user_registry.routers.users import get_user_service

    def _install(service):
        async def _service():
            return service
        app.dependency_overrides[get_user_service] = _service
    return _install


# =============================================================================
# Response Assertion Helpers
# =============================================================================

@pytest.fixture
def assert_error_response():
    """Helper to assert error response structure."""
    def _assert(response, status_code: int, message_contains: str = None):
        assert response.status_code == status_code
        data = response.json()
        assert data["success"] is False
        assert "message" in data
        if message_contains:
            assert message_contains.lower() in data["message"].lower()
        return data
    return _assert


@pytest.fixture
def error_fields():
    """Extract the field names from a validation error response."""
    def _fields(response) -> list[str]:
        return [e["field"] for e in response.json().get("errors", [])]
    return _fields
