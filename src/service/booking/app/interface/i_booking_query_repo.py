from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.booking_status import BookingStatus


class IBookingQueryRepo(ABC):
    """Repository interface for booking read operations"""

    @abstractmethod
    async def get_by_booking_id(self, *, booking_id: str) -> Optional[Booking]:
        pass

    @abstractmethod
    async def get_by_pnr(self, *, pnr: str) -> Optional[Booking]:
        pass

    @abstractmethod
    async def list_by_user(
        self,
        *,
        user_id: int,
        status: Optional[BookingStatus],
        page: int,
        limit: int,
    ) -> Tuple[List[Booking], int]:
        """Newest first; returns (page, total)"""
        pass
