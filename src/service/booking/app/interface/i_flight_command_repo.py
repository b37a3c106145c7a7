"""
Flight Command Repository Interface

Write side of the flight inventory. Every method runs on the unit of work's session;
nothing here commits.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.booking.domain.entity.flight_entity import Flight


class IFlightCommandRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, flight_id: int) -> Optional[Flight]:
        pass

    @abstractmethod
    async def exists_by_flight_number(self, *, flight_number: str) -> bool:
        pass

    @abstractmethod
    async def create(self, *, flight: Flight) -> Flight:
        """Insert flight, fares and seats; returns the flight with its storage id"""
        pass

    @abstractmethod
    async def claim_seats(self, *, flight_id: int, seat_numbers: List[str]) -> List[str]:
        """
        Conditionally flip seats to unavailable.

        Only seats that are currently available and not blocked are claimed.

        Returns:
            Seat numbers actually claimed (subset of `seat_numbers`)
        """
        pass

    @abstractmethod
    async def release_seats(self, *, flight_id: int, seat_numbers: List[str]) -> List[str]:
        """Flip seats back to available; returns the seat numbers that changed"""
        pass

    @abstractmethod
    async def save_inventory(self, *, flight: Flight) -> Flight:
        """Persist class counters, booking stats and status flags, bumping `version`"""
        pass
