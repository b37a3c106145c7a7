from typing import Dict, List, Optional, Self, Tuple

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.dto.booking_view import BookingView
from src.service.booking.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.booking.app.interface.i_flight_query_repo import IFlightQueryRepo
from src.service.booking.domain.entity.flight_entity import Flight
from src.service.booking.domain.enum.booking_status import BookingStatus


class ListBookingsUseCase:
    def __init__(
        self, *, booking_query_repo: IBookingQueryRepo, flight_query_repo: IFlightQueryRepo
    ) -> None:
        self.booking_query_repo = booking_query_repo
        self.flight_query_repo = flight_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        booking_query_repo: IBookingQueryRepo = Depends(Provide[Container.booking_query_repo]),
        flight_query_repo: IFlightQueryRepo = Depends(Provide[Container.flight_query_repo]),
    ) -> Self:
        return cls(booking_query_repo=booking_query_repo, flight_query_repo=flight_query_repo)

    @Logger.io
    async def execute(
        self,
        *,
        user_id: int,
        status: Optional[BookingStatus] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[BookingView], int]:
        bookings, total = await self.booking_query_repo.list_by_user(
            user_id=user_id, status=status, page=page, limit=limit
        )

        flights: Dict[int, Optional[Flight]] = {}
        for booking in bookings:
            if booking.flight_id not in flights:
                flights[booking.flight_id] = await self.flight_query_repo.get_by_id(
                    flight_id=booking.flight_id
                )

        return [
            BookingView(booking=booking, flight=flights[booking.flight_id]) for booking in bookings
        ], total
