"""
Unit-test fixtures: repositories are AsyncMocks behind an in-memory unit of work
"""

from typing import Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.platform.state.flight_lock import FlightLockManager
from src.service.booking.app.service.booking_policy import BookingPolicy
from src.service.booking.app.service.notification_dispatcher import NotificationDispatcher
from test.service.booking.fixtures import FakeUnitOfWork


@pytest.fixture
def flight_command_repo() -> AsyncMock:
    repo = AsyncMock()
    # Storage echoes what it was given
    repo.claim_seats = AsyncMock(side_effect=lambda *, flight_id, seat_numbers: list(seat_numbers))
    repo.release_seats = AsyncMock(
        side_effect=lambda *, flight_id, seat_numbers: list(seat_numbers)
    )
    repo.save_inventory = AsyncMock(side_effect=lambda *, flight: flight)
    return repo


@pytest.fixture
def booking_command_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.create = AsyncMock(side_effect=lambda *, booking: booking)
    repo.cancel = AsyncMock(return_value=True)
    repo.check_in = AsyncMock(return_value=True)
    repo.count_active_for_flight = AsyncMock(return_value=0)
    return repo


@pytest.fixture
def uow(flight_command_repo: AsyncMock, booking_command_repo: AsyncMock) -> FakeUnitOfWork:
    return FakeUnitOfWork(
        flight_command_repo=flight_command_repo, booking_command_repo=booking_command_repo
    )


@pytest.fixture
def uow_factory(uow: FakeUnitOfWork) -> Callable[[], FakeUnitOfWork]:
    return lambda: uow


@pytest.fixture
def lock_manager() -> FlightLockManager:
    return FlightLockManager()


@pytest.fixture
def policy() -> BookingPolicy:
    return BookingPolicy()


@pytest.fixture
def notification_dispatcher() -> MagicMock:
    return MagicMock(spec=NotificationDispatcher)
