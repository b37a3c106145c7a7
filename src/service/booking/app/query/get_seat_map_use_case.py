from datetime import datetime, timezone
from typing import Callable, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.dto.seat_map import SeatMap
from src.service.booking.app.interface.i_flight_query_repo import IFlightQueryRepo


class GetSeatMapUseCase:
    def __init__(
        self,
        *,
        flight_query_repo: IFlightQueryRepo,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.flight_query_repo = flight_query_repo
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    @classmethod
    @inject
    def depends(
        cls,
        flight_query_repo: IFlightQueryRepo = Depends(Provide[Container.flight_query_repo]),
    ) -> Self:
        return cls(flight_query_repo=flight_query_repo)

    @Logger.io
    async def execute(self, *, flight_id: int) -> SeatMap:
        flight = await self.flight_query_repo.get_by_id(flight_id=flight_id)
        if not flight:
            raise NotFoundError('Flight not found')
        flight.ensure_viewable(now=self.clock())
        return SeatMap.of(flight=flight)
