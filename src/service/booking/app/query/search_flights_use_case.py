from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional, Self, Tuple

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import ValidationError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_flight_query_repo import IFlightQueryRepo
from src.service.booking.domain.entity.flight_entity import Flight
from src.service.booking.domain.enum.seat_class import SeatClass


MAX_PASSENGERS = 9
MAX_PAGE_SIZE = 50


class SearchFlightsUseCase:
    def __init__(self, *, flight_query_repo: IFlightQueryRepo) -> None:
        self.flight_query_repo = flight_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        flight_query_repo: IFlightQueryRepo = Depends(Provide[Container.flight_query_repo]),
    ) -> Self:
        return cls(flight_query_repo=flight_query_repo)

    @Logger.io
    async def execute(
        self,
        *,
        origin: Optional[str] = None,
        destination: Optional[str] = None,
        departure_date: Optional[date] = None,
        passengers: int = 1,
        seat_class: SeatClass = SeatClass.ECONOMY,
        page: int = 1,
        limit: int = 10,
    ) -> Tuple[List[Flight], int]:
        if not 1 <= passengers <= MAX_PASSENGERS:
            raise ValidationError(f'Passengers must be between 1 and {MAX_PASSENGERS}')
        if page < 1 or not 1 <= limit <= MAX_PAGE_SIZE:
            raise ValidationError(f'Page must be >= 1 and limit between 1 and {MAX_PAGE_SIZE}')

        # One calendar day (UTC)
        departure_from = departure_to = None
        if departure_date is not None:
            departure_from = datetime.combine(departure_date, time.min, tzinfo=timezone.utc)
            departure_to = departure_from + timedelta(days=1)

        return await self.flight_query_repo.search(
            origin=origin.strip() if origin and origin.strip() else None,
            destination=destination.strip() if destination and destination.strip() else None,
            departure_from=departure_from,
            departure_to=departure_to,
            seat_class=seat_class,
            passengers=passengers,
            page=page,
            limit=limit,
        )
