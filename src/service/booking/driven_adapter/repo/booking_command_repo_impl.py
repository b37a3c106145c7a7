from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import ReferenceCollisionError
from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.booking_status import (
    ACTIVE_BOOKING_STATUSES,
    BookingStatus,
)
from src.service.booking.driven_adapter.mapper.booking_mapper import (
    to_booking_entity,
    to_booking_model,
    to_json,
)
from src.service.booking.driven_adapter.model.booking_model import BookingModel


# Columns whose unique constraint means "generated reference already taken"
_REFERENCE_COLUMNS = ('booking_id', 'pnr', 'confirmation_code')


class BookingCommandRepoImpl(IBookingCommandRepo):
    """Runs on the session owned by the unit of work; never commits"""

    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def create(self, *, booking: Booking) -> Booking:
        db_booking = to_booking_model(booking)
        self.session.add(db_booking)
        try:
            await self.session.flush()
        except IntegrityError as e:
            message = str(e.orig).lower()
            if any(column in message for column in _REFERENCE_COLUMNS):
                raise ReferenceCollisionError(
                    f'Booking reference collision for {booking.booking_id}'
                ) from e
            raise
        return to_booking_entity(db_booking)

    @Logger.io
    async def get_by_booking_id(self, *, booking_id: str) -> Optional[Booking]:
        result = await self.session.execute(
            select(BookingModel)
            .where(BookingModel.booking_id == booking_id)
            .execution_options(populate_existing=True)
        )
        db_booking = result.scalar_one_or_none()
        if not db_booking:
            return None
        return to_booking_entity(db_booking)

    @Logger.io
    async def cancel(self, *, booking: Booking) -> bool:
        result = await self.session.execute(
            update(BookingModel)
            .where(
                BookingModel.booking_id == booking.booking_id,
                BookingModel.status != BookingStatus.CANCELLED.value,
            )
            .values(
                status=BookingStatus.CANCELLED.value,
                cancellation=to_json(booking.cancellation),
                updated_at=booking.updated_at or datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1  # pyright: ignore[reportAttributeAccessIssue]

    @Logger.io
    async def check_in(self, *, booking: Booking) -> bool:
        result = await self.session.execute(
            update(BookingModel)
            .where(
                BookingModel.booking_id == booking.booking_id,
                BookingModel.status == BookingStatus.CONFIRMED.value,
                BookingModel.is_checked_in.is_(False),
            )
            .values(
                is_checked_in=True,
                check_in=to_json(booking.check_in),
                updated_at=booking.updated_at or datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1  # pyright: ignore[reportAttributeAccessIssue]

    @Logger.io
    async def mark_email_sent(self, *, booking_id: str) -> None:
        await self.session.execute(
            update(BookingModel)
            .where(BookingModel.booking_id == booking_id)
            .values(email_sent=True)
            .execution_options(synchronize_session=False)
        )

    @Logger.io
    async def count_active_for_flight(self, *, flight_id: int) -> int:
        total = await self.session.scalar(
            select(func.count(BookingModel.id)).where(
                BookingModel.flight_id == flight_id,
                BookingModel.status.in_([status.value for status in ACTIVE_BOOKING_STATUSES]),
            )
        )
        return total or 0
