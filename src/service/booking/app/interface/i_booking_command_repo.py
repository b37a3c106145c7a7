"""
Booking Command Repository Interface

Runs on the unit of work's session. State transitions are conditional updates so two
concurrent writers can never both win.
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.service.booking.domain.entity.booking_entity import Booking


class IBookingCommandRepo(ABC):
    @abstractmethod
    async def create(self, *, booking: Booking) -> Booking:
        """
        Insert booking.

        Raises:
            ReferenceCollisionError: booking_id, PNR or confirmation code already taken
        """
        pass

    @abstractmethod
    async def get_by_booking_id(self, *, booking_id: str) -> Optional[Booking]:
        pass

    @abstractmethod
    async def cancel(self, *, booking: Booking) -> bool:
        """
        Persist the cancelled booking only if the stored one is not cancelled yet.

        Returns:
            False when another writer cancelled it first
        """
        pass

    @abstractmethod
    async def check_in(self, *, booking: Booking) -> bool:
        """Persist check-in only if the stored booking is confirmed and not checked in"""
        pass

    @abstractmethod
    async def mark_email_sent(self, *, booking_id: str) -> None:
        pass

    @abstractmethod
    async def count_active_for_flight(self, *, flight_id: int) -> int:
        """Confirmed or pending bookings on the flight"""
        pass
