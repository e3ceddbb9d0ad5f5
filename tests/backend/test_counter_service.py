"""
Tests for CounterService.

These tests cover:
- Lazy creation of the counter document
- Strictly increasing values
- Independent named counters
- Uniqueness of values under concurrent callers
- Driver failures surfacing as StorageError
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from user_registry.core.errors import StorageError
from user_registry.services.counter_service import CounterService


class TestNextValue:
    """Tests for CounterService.next_value()."""

    @pytest.mark.asyncio
    async def test_first_call_creates_counter_at_one(self, counter_service, mock_users_db):
        """Counter document is upserted on first use."""
        assert await mock_users_db.counters.find_one({"name": "userId"}) is None

        value = await counter_service.next_value("userId")

        assert value == 1
        doc = await mock_users_db.counters.find_one({"name": "userId"})
        assert doc["seq"] == 1

    @pytest.mark.asyncio
    async def test_values_strictly_increase(self, counter_service):
        values = [await counter_service.next_value("userId") for _ in range(5)]

        assert values == [1, 2, 3, 4, 5]

    @pytest.mark.asyncio
    async def test_counters_are_independent(self, counter_service):
        await counter_service.next_value("userId")
        await counter_service.next_value("userId")

        assert await counter_service.next_value("orderId") == 1
        assert await counter_service.next_value("userId") == 3

    @pytest.mark.asyncio
    async def test_concurrent_callers_never_share_a_value(self, counter_service):
        """Simulated concurrent increments all get distinct values."""
        values = await asyncio.gather(
            *[counter_service.next_value("userId") for _ in range(25)]
        )

        assert len(set(values)) == 25
        assert sorted(values) == list(range(1, 26))

    @pytest.mark.asyncio
    async def test_current_value(self, counter_service):
        assert await counter_service.current_value("userId") == 0

        await counter_service.next_value("userId")
        await counter_service.next_value("userId")

        assert await counter_service.current_value("userId") == 2


class TestNextValueFailures:
    """Tests for error handling in next_value()."""

    def _service_with(self, find_one_and_update) -> CounterService:
        db = MagicMock()
        collection = MagicMock()
        collection.find_one_and_update = find_one_and_update
        db.__getitem__.return_value = collection
        return CounterService(db)

    @pytest.mark.asyncio
    async def test_upsert_race_is_retried(self):
        """A duplicate-key error from a racing upsert triggers one retry."""
        find_one_and_update = AsyncMock(
            side_effect=[
                DuplicateKeyError("E11000 duplicate key error", 11000),
                {"name": "userId", "seq": 2},
            ]
        )
        service = self._service_with(find_one_and_update)

        assert await service.next_value("userId") == 2
        assert find_one_and_update.await_count == 2

    @pytest.mark.asyncio
    async def test_repeated_duplicate_key_raises_storage_error(self):
        find_one_and_update = AsyncMock(
            side_effect=DuplicateKeyError("E11000 duplicate key error", 11000)
        )
        service = self._service_with(find_one_and_update)

        with pytest.raises(StorageError):
            await service.next_value("userId")

    @pytest.mark.asyncio
    async def test_driver_failure_raises_storage_error(self):
        find_one_and_update = AsyncMock(
            side_effect=ServerSelectionTimeoutError("no servers")
        )
        service = self._service_with(find_one_and_update)

        with pytest.raises(StorageError):
            await service.next_value("userId")
