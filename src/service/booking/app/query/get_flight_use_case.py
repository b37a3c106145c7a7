from datetime import datetime, timezone
from typing import Callable, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_flight_query_repo import IFlightQueryRepo
from src.service.booking.domain.entity.flight_entity import Flight


class GetFlightUseCase:
    """Public flight detail; inactive or departed flights are hidden"""

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
    async def execute(self, *, flight_id: int) -> Flight:
        flight = await self.flight_query_repo.get_by_id(flight_id=flight_id)
        if not flight:
            raise NotFoundError('Flight not found')
        flight.ensure_viewable(now=self.clock())
        return flight
