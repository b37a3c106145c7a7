from datetime import datetime, timezone
from typing import Callable, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import (
    InvalidStateError,
    NotFoundError,
    TimingViolationError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics, result_of
from src.platform.state.flight_lock import FlightLockManager, booking_lock_key, flight_lock_key
from src.service.booking.app.service.booking_policy import BookingPolicy
from src.service.booking.app.service.inventory_synchronizer import InventorySynchronizer
from src.service.booking.app.service.notification_dispatcher import NotificationDispatcher
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.entity.flight_entity import Flight
from src.service.booking.domain.entity.user_entity import UserEntity
from src.service.booking.domain.enum.notification_event import NotificationEvent


class CancelBookingUseCase:
    """
    Cancel a booking and refund part of its total.

    The status transition is authoritative: a conditional update under the booking
    lock, so of two concurrent cancels exactly one wins. Returning the seats to the
    flight happens afterwards in its own transaction and never fails the cancel.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        lock_manager: FlightLockManager,
        inventory_synchronizer: InventorySynchronizer,
        notification_dispatcher: NotificationDispatcher,
        policy: BookingPolicy,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.uow_factory = uow_factory
        self.lock_manager = lock_manager
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
            inventory_synchronizer=inventory_synchronizer,
            notification_dispatcher=notification_dispatcher,
            policy=policy,
        )

    @Logger.io
    async def execute(
        self, *, booking_id: str, user: UserEntity, reason: Optional[str] = None
    ) -> Booking:
        try:
            with self.tracer.start_as_current_span(
                'use_case.cancel_booking', attributes={'booking.id': booking_id}
            ):
                async with self.lock_manager.hold(key=booking_lock_key(booking_id)):
                    cancelled = await self._cancel(
                        booking_id=booking_id, user=user, reason=reason
                    )
        except Exception as e:
            metrics.record_cancellation(result=result_of(e))
            raise
        refund = cancelled.cancellation.refund_amount if cancelled.cancellation else None
        metrics.record_cancellation(
            result=result_of(None), refund_amount=refund, currency=cancelled.pricing.currency
        )
        Logger.base.info(f'🚫 [CANCEL-BOOKING] {booking_id} cancelled, refund {refund or 0} pending')

        flight = await self._reverse_inventory(booking=cancelled)
        if flight is not None:
            self.notification_dispatcher.dispatch(
                event=NotificationEvent.CANCELLATION, booking=cancelled, user=user, flight=flight
            )
        return cancelled

    async def _cancel(self, *, booking_id: str, user: UserEntity, reason: Optional[str]) -> Booking:
        now = self.clock()
        async with self.uow_factory() as uow:
            booking = await uow.booking_command_repo.get_by_booking_id(booking_id=booking_id)
            if booking is None:
                raise NotFoundError('Booking not found')
            booking.ensure_owned_by(user_id=user.id, action='cancel')

            cancelled = booking.cancel(
                cancelled_by=user.id,
                now=now,
                refund_percentage=self.policy.refund_percentage,
                refund_delay=self.policy.refund_delay,
                reason=reason,
            )

            if self.policy.cancellation_cutoff_hours > 0:
                flight = await uow.flight_command_repo.get_by_id(flight_id=booking.flight_id)
                if (
                    flight is not None
                    and flight.hours_until_departure(now=now)
                    < self.policy.cancellation_cutoff_hours
                ):
                    raise TimingViolationError(
                        f'Cancellation closed - flight departs in less than '
                        f'{self.policy.cancellation_cutoff_hours:g} hours'
                    )

            if not await uow.booking_command_repo.cancel(booking=cancelled):
                raise InvalidStateError(f'Booking {booking_id} is already cancelled')
            await uow.commit()
        return cancelled

    async def _reverse_inventory(self, *, booking: Booking) -> Optional[Flight]:
        try:
            async with self.lock_manager.hold(key=flight_lock_key(booking.flight_id)):
                async with self.uow_factory() as uow:
                    flight = await uow.flight_command_repo.get_by_id(flight_id=booking.flight_id)
                    if flight is None:
                        Logger.base.warning(
                            f'⚠️ [CANCEL-BOOKING] Flight {booking.flight_id} missing, '
                            f'seats of {booking.booking_id} not released'
                        )
                        return None
                    flight = await self.inventory_synchronizer.release_booking(
                        uow=uow, flight=flight, booking=booking
                    )
                    await uow.commit()
                    return flight
        except Exception as e:
            metrics.record_inventory_reversal_failure()
            Logger.base.exception(
                f'❌ [CANCEL-BOOKING] Inventory reversal failed for {booking.booking_id}: {e}'
            )
            return None
