"""
Global test fixtures for the User Registry backend.

This module provides shared fixtures for all tests including:
- Mock MongoDB (mongomock-motor)
- User payload factories
- FastAPI test clients
"""

import os
import sys
from datetime import date
from pathlib import Path
from typing import Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

# Settings are read when the app module is imported
os.environ.setdefault("MONGO_URI", "mongodb://localhost:27017/users_test")


# =============================================================================
# MongoDB Fixtures (mongomock-motor)
# =============================================================================

@pytest_asyncio.fixture
async def mock_async_mongo_client():
    """
    Create an async mock MongoDB client using mongomock-motor.
    """
    from mongomock_motor import AsyncMongoMockClient
    client = AsyncMongoMockClient()
    yield client
    client.close()


@pytest_asyncio.fixture
async def mock_users_db(mock_async_mongo_client):
    """Provide mock users_db database with the real indexes."""
    from user_registry.database.migrations import create_indexes

    db = mock_async_mongo_client["users_db"]
    await create_indexes(db)
    yield db


# =============================================================================
# User Fixtures
# =============================================================================

@pytest.fixture
def years_ago():
    """Same calendar day ``years`` years back (Feb 29 falls back to Feb 28)."""
    def _years_ago(years: int, today: date | None = None) -> date:
        today = today or date.today()
        try:
            return today.replace(year=today.year - years)
        except ValueError:
            return today.replace(year=today.year - years, day=28)
    return _years_ago


@pytest.fixture
def make_user_data():
    """
    Factory for valid registration payloads.

    Usage:
        data = make_user_data(email="other@example.com", first_name="Joe")
    """
    def _make(**overrides) -> dict:
        data = {
            "first_name": "Ann",
            "middle_name": "Marie",
            "last_name": "Smith",
            "email": "ann.smith@example.com",
            "gender": "female",
            "date_of_birth": "1990-05-17",
            "user_name": "annsmith",
        }
        data.update(overrides)
        return data
    return _make


@pytest.fixture
def test_user_data(make_user_data) -> dict:
    """Basic valid registration payload."""
    return make_user_data()


# =============================================================================
# FastAPI Test Client Fixtures
# =============================================================================

@pytest.fixture
def app():
    """
    Create FastAPI app for testing.

    Note: This imports the actual app. Clients below do not run the lifespan,
    so no real database is contacted.
    """
    from user_registry.main import app
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app) -> Generator:
    """
    Create a TestClient for the FastAPI app.

    Use this for synchronous endpoint testing of routes that need no database.
    """
    yield TestClient(app, raise_server_exceptions=False)


@pytest_asyncio.fixture
async def async_client(app):
    """
    Create an async test client.

    Use this for testing async endpoints.
    """
    from httpx import AsyncClient, ASGITransport

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test"
    ) as ac:
        yield ac
