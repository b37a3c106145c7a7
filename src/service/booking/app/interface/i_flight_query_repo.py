from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple

from src.service.booking.domain.entity.flight_entity import Flight
from src.service.booking.domain.enum.seat_class import SeatClass


class IFlightQueryRepo(ABC):
    """Repository interface for flight catalog reads"""

    @abstractmethod
    async def get_by_id(self, *, flight_id: int) -> Optional[Flight]:
        pass

    @abstractmethod
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
        """
        Active flights with at least `passengers` seats left in `seat_class`.

        `origin` / `destination` partially match airport code or city, case-insensitive.
        The departure window is half-open: [departure_from, departure_to).

        Returns:
            (page ordered by departure time then economy price, total matches)
        """
        pass
