"""
Integration fixtures: real repositories and use cases on the SQLite test database.

Every test starts from empty tables (see `clean_database` in test/conftest.py).
"""

from collections.abc import AsyncIterator

import pytest
import pytest_asyncio

from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.platform.state.flight_lock import FlightLockManager
from src.service.booking.app.command.cancel_booking_use_case import CancelBookingUseCase
from src.service.booking.app.command.check_in_use_case import CheckInUseCase
from src.service.booking.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.booking.app.command.deactivate_flight_use_case import DeactivateFlightUseCase
from src.service.booking.app.service.booking_policy import BookingPolicy
from src.service.booking.app.service.inventory_synchronizer import InventorySynchronizer
from src.service.booking.app.service.notification_dispatcher import NotificationDispatcher
from src.service.booking.domain.entity.flight_entity import Flight
from src.service.booking.domain.entity.user_entity import UserEntity
from src.service.booking.domain.service.pricing_calculator import PricingCalculator
from src.service.booking.domain.service.reference_generator import ReferenceGenerator
from src.service.booking.driven_adapter.notification.mock_email_service import (
    MockEmailService,
)
from src.service.booking.driven_adapter.repo.booking_query_repo_impl import BookingQueryRepoImpl
from src.service.booking.driven_adapter.repo.flight_query_repo_impl import FlightQueryRepoImpl
from src.service.booking.driving_adapter.http_controller.auth.jwt_auth import JwtAuth
from test.constants import ANOTHER_CUSTOMER, TEST_ADMIN, TEST_CUSTOMER
from test.service.booking.fixtures import create_flight


@pytest.fixture
def flight_query_repo() -> FlightQueryRepoImpl:
    return FlightQueryRepoImpl(session_factory=Database().session)


@pytest.fixture
def booking_query_repo() -> BookingQueryRepoImpl:
    return BookingQueryRepoImpl(session_factory=Database().session)


@pytest.fixture
def email_service() -> MockEmailService:
    return MockEmailService()


@pytest_asyncio.fixture
async def notification_dispatcher(
    email_service: MockEmailService,
) -> AsyncIterator[NotificationDispatcher]:
    dispatcher = NotificationDispatcher(notification_service=email_service)
    yield dispatcher
    # Background deliveries touch the database; finish them before the schema goes
    await dispatcher.drain()


@pytest.fixture
def lock_manager() -> FlightLockManager:
    return FlightLockManager()


@pytest.fixture
def policy() -> BookingPolicy:
    return BookingPolicy()


@pytest.fixture
def create_booking_use_case(
    lock_manager: FlightLockManager,
    notification_dispatcher: NotificationDispatcher,
    policy: BookingPolicy,
) -> CreateBookingUseCase:
    return CreateBookingUseCase(
        uow_factory=SqlAlchemyUnitOfWork,
        lock_manager=lock_manager,
        pricing_calculator=PricingCalculator(),
        reference_generator=ReferenceGenerator(),
        inventory_synchronizer=InventorySynchronizer(),
        notification_dispatcher=notification_dispatcher,
        policy=policy,
    )


@pytest.fixture
def cancel_booking_use_case(
    lock_manager: FlightLockManager,
    notification_dispatcher: NotificationDispatcher,
    policy: BookingPolicy,
) -> CancelBookingUseCase:
    return CancelBookingUseCase(
        uow_factory=SqlAlchemyUnitOfWork,
        lock_manager=lock_manager,
        inventory_synchronizer=InventorySynchronizer(),
        notification_dispatcher=notification_dispatcher,
        policy=policy,
    )


@pytest.fixture
def check_in_use_case(lock_manager: FlightLockManager, policy: BookingPolicy) -> CheckInUseCase:
    return CheckInUseCase(uow_factory=SqlAlchemyUnitOfWork, lock_manager=lock_manager, policy=policy)


@pytest.fixture
def deactivate_flight_use_case(lock_manager: FlightLockManager) -> DeactivateFlightUseCase:
    return DeactivateFlightUseCase(uow_factory=SqlAlchemyUnitOfWork, lock_manager=lock_manager)


@pytest_asyncio.fixture
async def flight() -> Flight:
    """Scheduled flight three days out, 24 economy seats at 200"""
    return await create_flight()


# =============================================================================
# HTTP auth
# =============================================================================
def _bearer(user: UserEntity) -> dict[str, str]:
    return {'Authorization': f'Bearer {JwtAuth().create_jwt_token(user)}'}


@pytest.fixture
def customer_headers() -> dict[str, str]:
    return _bearer(TEST_CUSTOMER)


@pytest.fixture
def another_customer_headers() -> dict[str, str]:
    return _bearer(ANOTHER_CUSTOMER)


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return _bearer(TEST_ADMIN)
