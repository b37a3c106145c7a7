import time
from datetime import datetime, timezone
from typing import Callable, List, Optional, Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import (
    ConflictError,
    NotFoundError,
    ReferenceCollisionError,
    ValidationError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics, result_of
from src.platform.state.flight_lock import FlightLockManager, flight_lock_key
from src.service.booking.app.dto.booking_view import BookingView
from src.service.booking.app.service.booking_policy import BookingPolicy
from src.service.booking.app.service.inventory_synchronizer import InventorySynchronizer
from src.service.booking.app.service.notification_dispatcher import NotificationDispatcher
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.entity.flight_entity import Flight, Seat
from src.service.booking.domain.entity.user_entity import UserEntity
from src.service.booking.domain.enum.notification_event import NotificationEvent
from src.service.booking.domain.service.pricing_calculator import PricingCalculator
from src.service.booking.domain.service.reference_generator import ReferenceGenerator
from src.service.booking.domain.value_object.passenger import (
    ContactDetails,
    Passenger,
    SpecialService,
)


class CreateBookingUseCase:
    """
    Create a confirmed, paid (mock) booking.

    Flow (under the per-flight lock, one transaction):
    1. Validate request shape (passengers, contact e-mail, seat list)
    2. Flight exists, is active and scheduled/boarding, departs after the booking cutoff
    3. Every seat exists and is bookable
    4. Price, generate references, complete mock payment
    5. Claim seats at storage, insert booking, update counters and booking stats
    6. Commit, then send the confirmation in the background

    A booking reference collision rolls the whole transaction back and retries with
    fresh references.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        lock_manager: FlightLockManager,
        pricing_calculator: PricingCalculator,
        reference_generator: ReferenceGenerator,
        inventory_synchronizer: InventorySynchronizer,
        notification_dispatcher: NotificationDispatcher,
        policy: BookingPolicy,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.uow_factory = uow_factory
        self.lock_manager = lock_manager
        self.pricing_calculator = pricing_calculator
        self.reference_generator = reference_generator
        self.inventory_synchronizer = inventory_synchronizer
        self.notification_dispatcher = notification_dispatcher
        self.policy = policy
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
        lock_manager: FlightLockManager = Depends(Provide[Container.flight_lock_manager]),
        pricing_calculator: PricingCalculator = Depends(Provide[Container.pricing_calculator]),
        reference_generator: ReferenceGenerator = Depends(
            Provide[Container.reference_generator]
        ),
        inventory_synchronizer: InventorySynchronizer = Depends(
            Provide[Container.inventory_synchronizer]
        ),
        notification_dispatcher: NotificationDispatcher = Depends(
            Provide[Container.notification_dispatcher]
        ),
        policy: BookingPolicy = Depends(Provide[Container.booking_policy]),
    ) -> Self:
        return cls(
            uow_factory=uow_factory,
            lock_manager=lock_manager,
            pricing_calculator=pricing_calculator,
            reference_generator=reference_generator,
            inventory_synchronizer=inventory_synchronizer,
            notification_dispatcher=notification_dispatcher,
            policy=policy,
        )

    @staticmethod
    def _assign_seats(
        *, passengers: List[Passenger], selected_seats: Optional[List[str]]
    ) -> List[Passenger]:
        if not selected_seats:
            return passengers
        if len(selected_seats) != len(passengers):
            raise ValidationError(
                f'{len(selected_seats)} seats selected for {len(passengers)} passengers'
            )
        return [
            attrs.evolve(passenger, seat_number=seat_number)
            for passenger, seat_number in zip(passengers, selected_seats)
        ]

    @staticmethod
    def _resolve_seats(*, flight: Flight, seat_numbers: List[str]) -> List[Seat]:
        seats = []
        for seat_number in seat_numbers:
            seat = flight.find_seat(seat_number)
            if seat is None:
                raise ValidationError(f'Seat {seat_number} does not exist')
            if not seat.is_bookable:
                raise ConflictError(f'Seat {seat_number} is not available')
            seats.append(seat)
        return seats

    @Logger.io
    async def execute(
        self,
        *,
        user: UserEntity,
        flight_id: int,
        passengers: List[Passenger],
        contact_details: Optional[ContactDetails],
        selected_seats: Optional[List[str]] = None,
        special_services: Optional[List[SpecialService]] = None,
    ) -> BookingView:
        start_time = time.time()
        error: Optional[Exception] = None
        seat_classes: List[str] = []
        try:
            passengers = self._assign_seats(passengers=passengers, selected_seats=selected_seats)
            contact = Booking.validate_request(
                passengers=passengers, contact_details=contact_details
            )
            seat_numbers = [passenger.seat_number for passenger in passengers]

            with self.tracer.start_as_current_span(
                'use_case.create_booking',
                attributes={'flight.id': flight_id, 'booking.seats': ','.join(seat_numbers)},
            ):
                async with self.lock_manager.hold(key=flight_lock_key(flight_id)):
                    booking, flight = await self._create_with_retry(
                        user=user,
                        flight_id=flight_id,
                        passengers=passengers,
                        contact_details=contact,
                        special_services=special_services or [],
                    )
            seat_classes = [str(passenger.seat_class) for passenger in booking.passengers]
        except Exception as e:
            error = e
            raise
        finally:
            metrics.record_booking_request(
                result=result_of(error),
                duration=time.time() - start_time,
                seat_classes=seat_classes,
            )

        Logger.base.info(
            f'✅ [CREATE-BOOKING] {booking.booking_id} (PNR {booking.pnr}) on flight '
            f'{flight.flight_number}: seats {",".join(seat_numbers)}, '
            f'total {booking.pricing.total_amount} {booking.pricing.currency}'
        )

        self.notification_dispatcher.dispatch(
            event=NotificationEvent.CONFIRMATION,
            booking=booking,
            user=user,
            flight=flight,
            on_sent=lambda: self._mark_email_sent(booking_id=booking.booking_id),
        )
        return BookingView(booking=booking, flight=flight)

    async def _create_with_retry(
        self,
        *,
        user: UserEntity,
        flight_id: int,
        passengers: List[Passenger],
        contact_details: ContactDetails,
        special_services: List[SpecialService],
    ) -> tuple[Booking, Flight]:
        max_attempts = max(1, self.policy.reference_max_attempts)
        for attempt in range(1, max_attempts + 1):
            try:
                return await self._create_once(
                    user=user,
                    flight_id=flight_id,
                    passengers=passengers,
                    contact_details=contact_details,
                    special_services=special_services,
                )
            except ReferenceCollisionError as e:
                Logger.base.warning(
                    f'🔁 [CREATE-BOOKING] Reference collision (attempt {attempt}/{max_attempts}): {e}'
                )
        raise ConflictError('Could not allocate a unique booking reference, please retry')

    async def _create_once(
        self,
        *,
        user: UserEntity,
        flight_id: int,
        passengers: List[Passenger],
        contact_details: ContactDetails,
        special_services: List[SpecialService],
    ) -> tuple[Booking, Flight]:
        now = self.clock()
        async with self.uow_factory() as uow:
            flight = await uow.flight_command_repo.get_by_id(flight_id=flight_id)
            if flight is None:
                raise NotFoundError('Flight not found')
            flight.ensure_bookable(now=now, cutoff_hours=self.policy.booking_cutoff_hours)

            seat_numbers = [passenger.seat_number for passenger in passengers]
            seats = self._resolve_seats(flight=flight, seat_numbers=seat_numbers)
            # Seat class always comes from the flight's seat map
            passengers = [
                attrs.evolve(passenger, seat_class=seat.seat_class)
                for passenger, seat in zip(passengers, seats)
            ]

            pricing = self.pricing_calculator.compute_pricing(
                seats=seats, fares=flight.fares, special_services=special_services
            )
            booking = (
                Booking.create(
                    user_id=user.id,
                    flight_id=flight_id,
                    passengers=passengers,
                    contact_details=contact_details,
                    pricing=pricing,
                    special_services=special_services,
                    references=self.reference_generator,
                    now=now,
                )
                .complete_mock_payment(references=self.reference_generator, now=now)
                .ensure_confirmation_code(references=self.reference_generator)
            )

            await self.inventory_synchronizer.claim_seats(
                uow=uow, flight=flight, seat_numbers=seat_numbers
            )
            booking = await uow.booking_command_repo.create(booking=booking)
            flight = await self.inventory_synchronizer.record_booking(
                uow=uow, flight=flight, booking=booking
            )
            await uow.commit()

        return booking, flight

    async def _mark_email_sent(self, *, booking_id: str) -> None:
        async with self.uow_factory() as uow:
            await uow.booking_command_repo.mark_email_sent(booking_id=booking_id)
            await uow.commit()
