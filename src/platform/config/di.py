"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.platform.state.flight_lock import FlightLockManager
from src.service.booking.app.service.booking_policy import BookingPolicy
from src.service.booking.app.service.inventory_synchronizer import InventorySynchronizer
from src.service.booking.app.service.notification_dispatcher import NotificationDispatcher
from src.service.booking.domain.service.pricing_calculator import PricingCalculator
from src.service.booking.domain.service.reference_generator import ReferenceGenerator
from src.service.booking.driven_adapter.notification.mock_email_service import (
    MockEmailService,
)
from src.service.booking.driven_adapter.repo.booking_query_repo_impl import BookingQueryRepoImpl
from src.service.booking.driven_adapter.repo.flight_query_repo_impl import FlightQueryRepoImpl
from src.service.booking.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database
    database = providers.Singleton(Database)

    # A fresh unit of work per call; use cases receive the provider itself as factory
    unit_of_work = providers.Factory(SqlAlchemyUnitOfWork)

    # Per-flight / per-booking critical sections (in-process)
    flight_lock_manager = providers.Singleton(FlightLockManager)

    # Background task group (set by main.py lifespan)
    # Used for fire-and-forget tasks like notification delivery
    background_task_group = providers.Object(None)

    # Domain services
    pricing_calculator = providers.Singleton(
        PricingCalculator,
        tax_rate=config_service.provided.TAX_RATE,
        booking_fee=config_service.provided.BOOKING_FEE,
        currency=config_service.provided.CURRENCY,
    )
    reference_generator = providers.Singleton(ReferenceGenerator)
    booking_policy = providers.Singleton(BookingPolicy.from_settings, config_service)
    inventory_synchronizer = providers.Singleton(InventorySynchronizer)

    # Notifications
    notification_service = providers.Singleton(
        MockEmailService, debug=config_service.provided.DEBUG
    )
    notification_dispatcher = providers.Singleton(
        NotificationDispatcher,
        notification_service=notification_service,
        task_group_provider=background_task_group.provider,
    )

    # Read repositories (stateless - session per call)
    flight_query_repo = providers.Singleton(
        FlightQueryRepoImpl, session_factory=database.provided.session
    )
    booking_query_repo = providers.Singleton(
        BookingQueryRepoImpl, session_factory=database.provided.session
    )

    # Auth service
    jwt_auth = providers.Singleton(JwtAuth)


container = Container()