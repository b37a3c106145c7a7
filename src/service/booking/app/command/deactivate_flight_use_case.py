from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import InvalidStateError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.state.flight_lock import FlightLockManager, flight_lock_key
from src.service.booking.domain.entity.flight_entity import Flight


class DeactivateFlightUseCase:
    """Admin: flights are never deleted, only taken out of the catalog"""

    def __init__(
        self, *, uow_factory: Callable[[], AbstractUnitOfWork], lock_manager: FlightLockManager
    ) -> None:
        self.uow_factory = uow_factory
        self.lock_manager = lock_manager

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
        lock_manager: FlightLockManager = Depends(Provide[Container.flight_lock_manager]),
    ) -> Self:
        return cls(uow_factory=uow_factory, lock_manager=lock_manager)

    @Logger.io
    async def execute(self, *, flight_id: int) -> Flight:
        async with self.lock_manager.hold(key=flight_lock_key(flight_id)):
            async with self.uow_factory() as uow:
                flight = await uow.flight_command_repo.get_by_id(flight_id=flight_id)
                if flight is None:
                    raise NotFoundError('Flight not found')

                active_bookings = await uow.booking_command_repo.count_active_for_flight(
                    flight_id=flight_id
                )
                if active_bookings:
                    raise InvalidStateError(
                        f'Cannot deactivate flight with active bookings ({active_bookings})'
                    )

                flight = await uow.flight_command_repo.save_inventory(flight=flight.deactivate())
                await uow.commit()

        Logger.base.info(f'🛬 [DEACTIVATE-FLIGHT] {flight.flight_number} deactivated')
        return flight
