from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.dto.booking_view import BookingView
from src.service.booking.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.booking.app.interface.i_flight_query_repo import IFlightQueryRepo
from src.service.booking.domain.service.reference_generator import PNR_LENGTH


class SearchBookingByPnrUseCase:
    """
    Unauthenticated lookup by PNR.

    The controller projects the result down to non-sensitive fields only
    (no contact or payment details).
    """

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
    async def execute(self, *, pnr: str) -> BookingView:
        pnr = pnr.strip().upper()
        if len(pnr) != PNR_LENGTH:
            raise DomainError(f'PNR must be {PNR_LENGTH} characters')

        booking = await self.booking_query_repo.get_by_pnr(pnr=pnr)
        if not booking:
            raise NotFoundError('Booking not found with this PNR')

        flight = await self.flight_query_repo.get_by_id(flight_id=booking.flight_id)
        return BookingView(booking=booking, flight=flight)
