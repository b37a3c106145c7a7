from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncContextManager, AsyncIterator, Callable, List, Optional, Tuple

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_flight_query_repo import IFlightQueryRepo
from src.service.booking.domain.entity.flight_entity import Flight
from src.service.booking.domain.enum.flight_status import BOOKABLE_FLIGHT_STATUSES
from src.service.booking.domain.enum.seat_class import SeatClass
from src.service.booking.driven_adapter.mapper.flight_mapper import to_flight_entity
from src.service.booking.driven_adapter.model.flight_model import FlightFareModel, FlightModel


class FlightQueryRepoImpl(IFlightQueryRepo):
    def __init__(
        self, session_factory: Callable[..., AsyncContextManager[AsyncSession]] | None = None
    ):
        self.session_factory = session_factory
        self.session: AsyncSession | None = None

    @asynccontextmanager
    async def _get_session(self) -> AsyncIterator[AsyncSession]:
        if self.session is not None:
            yield self.session
        elif self.session_factory is not None:
            async with self.session_factory() as session:
                yield session
        else:
            raise RuntimeError('No session or session_factory available')

    @Logger.io(truncate_content=True)  # type: ignore
    async def get_by_id(self, *, flight_id: int) -> Optional[Flight]:
        async with self._get_session() as session:
            result = await session.execute(select(FlightModel).where(FlightModel.id == flight_id))
            db_flight = result.scalar_one_or_none()
            if not db_flight:
                return None
            return to_flight_entity(db_flight)

    @staticmethod
    def _matches_endpoint(*, code_column, city_column, term: str):
        pattern = f'%{term}%'
        return or_(code_column.ilike(pattern), city_column.ilike(pattern))

    @Logger.io(truncate_content=True)  # type: ignore
    async def search(
        self,
        *,
        origin: Optional[str],
        destination: Optional[str],
        departure_from: Optional[datetime],
        departure_to: Optional[datetime],
        seat_class: SeatClass,
        passengers: int,
        page: int,
        limit: int,
    ) -> Tuple[List[Flight], int]:
        class_fare = aliased(FlightFareModel)
        economy_fare = aliased(FlightFareModel)

        conditions = [
            FlightModel.is_active.is_(True),
            FlightModel.status.in_([status.value for status in BOOKABLE_FLIGHT_STATUSES]),
        ]
        if origin:
            conditions.append(
                self._matches_endpoint(
                    code_column=FlightModel.departure_airport_code,
                    city_column=FlightModel.departure_city,
                    term=origin,
                )
            )
        if destination:
            conditions.append(
                self._matches_endpoint(
                    code_column=FlightModel.arrival_airport_code,
                    city_column=FlightModel.arrival_city,
                    term=destination,
                )
            )
        if departure_from is not None:
            conditions.append(FlightModel.departure_time >= departure_from)
        if departure_to is not None:
            conditions.append(FlightModel.departure_time < departure_to)

        has_capacity = and_(
            class_fare.flight_id == FlightModel.id,
            class_fare.seat_class == seat_class.value,
            class_fare.available_seats >= passengers,
        )

        async with self._get_session() as session:
            total = await session.scalar(
                select(func.count(FlightModel.id)).join(class_fare, has_capacity).where(*conditions)
            )

            result = await session.execute(
                select(FlightModel)
                .join(class_fare, has_capacity)
                .outerjoin(
                    economy_fare,
                    and_(
                        economy_fare.flight_id == FlightModel.id,
                        economy_fare.seat_class == SeatClass.ECONOMY.value,
                    ),
                )
                .where(*conditions)
                .order_by(FlightModel.departure_time, economy_fare.price, FlightModel.id)
                .offset((page - 1) * limit)
                .limit(limit)
            )
            flights = [to_flight_entity(db_flight) for db_flight in result.scalars().all()]

        return flights, total or 0
