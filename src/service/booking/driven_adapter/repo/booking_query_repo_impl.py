from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_booking_query_repo import IBookingQueryRepo
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.booking_status import BookingStatus
from src.service.booking.driven_adapter.mapper.booking_mapper import to_booking_entity
from src.service.booking.driven_adapter.model.booking_model import BookingModel


class BookingQueryRepoImpl(IBookingQueryRepo):
    def __init__(
        self, session_factory: Callable[..., AsyncContextManager[AsyncSession]] | None = None
    ):
        self.session_factory = session_factory
        self.session: AsyncSession | None = None

    @asynccontextmanager
    async def _get_session(self) -> AsyncIterator[AsyncSession]:
        """
        Get session for query execution.

        An injected session is used as is; otherwise one is opened from session_factory.
        """
        if self.session is not None:
            yield self.session
        elif self.session_factory is not None:
            async with self.session_factory() as session:
                yield session
        else:
            raise RuntimeError('No session or session_factory available')

    @Logger.io
    async def get_by_booking_id(self, *, booking_id: str) -> Optional[Booking]:
        async with self._get_session() as session:
            result = await session.execute(
                select(BookingModel).where(BookingModel.booking_id == booking_id)
            )
            db_booking = result.scalar_one_or_none()
            if not db_booking:
                return None
            return to_booking_entity(db_booking)

    @Logger.io
    async def get_by_pnr(self, *, pnr: str) -> Optional[Booking]:
        async with self._get_session() as session:
            result = await session.execute(
                select(BookingModel).where(BookingModel.pnr == pnr.upper())
            )
            db_booking = result.scalar_one_or_none()
            if not db_booking:
                return None
            return to_booking_entity(db_booking)

    @Logger.io(truncate_content=True)  # type: ignore
    async def list_by_user(
        self,
        *,
        user_id: int,
        status: Optional[BookingStatus],
        page: int,
        limit: int,
    ) -> Tuple[List[Booking], int]:
        conditions = [BookingModel.user_id == user_id]
        if status:
            conditions.append(BookingModel.status == status.value)

        async with self._get_session() as session:
            total = await session.scalar(select(func.count(BookingModel.id)).where(*conditions))
            result = await session.execute(
                select(BookingModel)
                .where(*conditions)
                .order_by(BookingModel.created_at.desc(), BookingModel.id.desc())
                .offset((page - 1) * limit)
                .limit(limit)
            )
            bookings = [to_booking_entity(db_booking) for db_booking in result.scalars().all()]

        return bookings, total or 0
