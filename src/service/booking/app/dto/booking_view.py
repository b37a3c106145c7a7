from typing import Optional

import attrs

from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.entity.flight_entity import Flight


@attrs.define(frozen=True)
class BookingView:
    """Booking together with the flight it references (flight may be gone)"""

    booking: Booking
    flight: Optional[Flight]
