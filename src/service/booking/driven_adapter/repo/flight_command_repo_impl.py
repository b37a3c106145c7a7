from datetime import datetime, timezone
from typing import List, Optional

import attrs
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_flight_command_repo import IFlightCommandRepo
from src.service.booking.domain.entity.flight_entity import Flight
from src.service.booking.driven_adapter.mapper.flight_mapper import (
    to_flight_entity,
    to_flight_model,
)
from src.service.booking.driven_adapter.model.flight_model import (
    FlightFareModel,
    FlightModel,
    SeatModel,
)


class FlightCommandRepoImpl(IFlightCommandRepo):
    """Runs on the session owned by the unit of work; never commits"""

    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io(truncate_content=True)  # type: ignore
    async def get_by_id(self, *, flight_id: int) -> Optional[Flight]:
        result = await self.session.execute(
            select(FlightModel)
            .where(FlightModel.id == flight_id)
            .execution_options(populate_existing=True)
        )
        db_flight = result.scalar_one_or_none()
        if not db_flight:
            return None
        return to_flight_entity(db_flight)

    @Logger.io
    async def exists_by_flight_number(self, *, flight_number: str) -> bool:
        result = await self.session.execute(
            select(FlightModel.id).where(FlightModel.flight_number == flight_number.upper())
        )
        return result.first() is not None

    @Logger.io(truncate_content=True)  # type: ignore
    async def create(self, *, flight: Flight) -> Flight:
        db_flight = to_flight_model(flight)
        self.session.add(db_flight)
        await self.session.flush()
        return attrs.evolve(
            flight,
            id=db_flight.id,
            created_at=db_flight.created_at,
            updated_at=db_flight.updated_at,
        )

    @Logger.io
    async def claim_seats(self, *, flight_id: int, seat_numbers: List[str]) -> List[str]:
        claimed = []
        for seat_number in seat_numbers:
            result = await self.session.execute(
                update(SeatModel)
                .where(
                    SeatModel.flight_id == flight_id,
                    SeatModel.seat_number == seat_number,
                    SeatModel.is_available.is_(True),
                    SeatModel.is_blocked.is_(False),
                )
                .values(is_available=False)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 1:  # pyright: ignore[reportAttributeAccessIssue]
                claimed.append(seat_number)
        return claimed

    @Logger.io
    async def release_seats(self, *, flight_id: int, seat_numbers: List[str]) -> List[str]:
        released = []
        for seat_number in seat_numbers:
            result = await self.session.execute(
                update(SeatModel)
                .where(
                    SeatModel.flight_id == flight_id,
                    SeatModel.seat_number == seat_number,
                    SeatModel.is_available.is_(False),
                )
                .values(is_available=True)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 1:  # pyright: ignore[reportAttributeAccessIssue]
                released.append(seat_number)
        return released

    @Logger.io(truncate_content=True)  # type: ignore
    async def save_inventory(self, *, flight: Flight) -> Flight:
        flight_id = flight.stored_id
        now = datetime.now(timezone.utc)

        # Optimistic check on top of the in-process flight lock
        result = await self.session.execute(
            update(FlightModel)
            .where(FlightModel.id == flight_id, FlightModel.version == flight.version)
            .values(
                version=FlightModel.version + 1,
                total_bookings=flight.booking_stats.total_bookings,
                revenue=flight.booking_stats.revenue,
                status=flight.status.value,
                is_active=flight.is_active,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:  # pyright: ignore[reportAttributeAccessIssue]
            raise ConflictError(f'Flight {flight.flight_number} was modified concurrently')

        for seat_class, fare in flight.fares.items():
            await self.session.execute(
                update(FlightFareModel)
                .where(
                    FlightFareModel.flight_id == flight_id,
                    FlightFareModel.seat_class == seat_class.value,
                )
                .values(available_seats=fare.available_seats)
                .execution_options(synchronize_session=False)
            )

        return attrs.evolve(flight, version=flight.version + 1, updated_at=now)
