from datetime import datetime, timezone
from typing import Callable, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import InvalidStateError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.booking_metrics import metrics, result_of
from src.platform.state.flight_lock import FlightLockManager, booking_lock_key
from src.service.booking.app.dto.boarding_pass import BoardingPass
from src.service.booking.app.service.booking_policy import BookingPolicy
from src.service.booking.domain.entity.user_entity import UserEntity


class CheckInUseCase:
    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        lock_manager: FlightLockManager,
        policy: BookingPolicy,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.uow_factory = uow_factory
        self.lock_manager = lock_manager
        self.policy = policy
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
        lock_manager: FlightLockManager = Depends(Provide[Container.flight_lock_manager]),
        policy: BookingPolicy = Depends(Provide[Container.booking_policy]),
    ) -> Self:
        return cls(uow_factory=uow_factory, lock_manager=lock_manager, policy=policy)

    @Logger.io
    async def execute(self, *, booking_id: str, user: UserEntity) -> BoardingPass:
        """
        Check a confirmed booking in and issue its boarding pass.

        Allowed from `CHECK_IN_WINDOW_HOURS` before departure until departure.
        Checking in twice is an error, not a no-op.
        """
        try:
            boarding_pass = await self._check_in(booking_id=booking_id, user=user)
        except Exception as e:
            metrics.record_check_in(result=result_of(e))
            raise
        metrics.record_check_in(result=result_of(None))
        return boarding_pass

    async def _check_in(self, *, booking_id: str, user: UserEntity) -> BoardingPass:
        now = self.clock()
        async with self.lock_manager.hold(key=booking_lock_key(booking_id)):
            async with self.uow_factory() as uow:
                booking = await uow.booking_command_repo.get_by_booking_id(booking_id=booking_id)
                if booking is None:
                    raise NotFoundError('Booking not found')
                booking.ensure_owned_by(user_id=user.id, action='check in')

                flight = await uow.flight_command_repo.get_by_id(flight_id=booking.flight_id)
                if flight is None:
                    raise NotFoundError('Flight not found')

                checked_in = booking.check_in(
                    departure_time=flight.departure_time,
                    now=now,
                    window_hours=self.policy.check_in_window_hours,
                )
                if not await uow.booking_command_repo.check_in(booking=checked_in):
                    raise InvalidStateError(f'Booking {booking_id} is already checked in')
                await uow.commit()

        Logger.base.info(f'🎫 [CHECK-IN] {booking_id} checked in for {flight.flight_number}')
        return BoardingPass.issue(booking=checked_in, flight=flight)
