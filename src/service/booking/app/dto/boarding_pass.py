from datetime import datetime
from typing import List

import attrs

from src.platform.exception.exceptions import InvalidStateError
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.entity.flight_entity import Flight
from src.service.booking.domain.enum.seat_class import SeatClass


@attrs.define(frozen=True)
class BoardingPassPassenger:
    name: str
    seat_number: str
    seat_class: SeatClass


@attrs.define(frozen=True)
class BoardingPass:
    booking_id: str
    pnr: str
    flight_number: str
    departure_airport: str
    arrival_airport: str
    departure_time: datetime
    gate: str | None
    terminal: str | None
    checked_in_at: datetime
    passengers: List[BoardingPassPassenger]

    @classmethod
    def issue(cls, *, booking: Booking, flight: Flight) -> 'BoardingPass':
        checked_in_at = booking.check_in.checked_in_at
        if checked_in_at is None:
            raise InvalidStateError(f'Booking {booking.booking_id} is not checked in')
        departure = flight.route.departure
        return cls(
            booking_id=booking.booking_id,
            pnr=booking.pnr,
            flight_number=flight.flight_number,
            departure_airport=departure.airport_code,
            arrival_airport=flight.route.arrival.airport_code,
            departure_time=departure.time,
            gate=departure.gate,
            terminal=departure.terminal,
            checked_in_at=checked_in_at,
            passengers=[
                BoardingPassPassenger(
                    name=passenger.full_name,
                    seat_number=passenger.seat_number,
                    seat_class=passenger.seat_class or SeatClass.ECONOMY,
                )
                for passenger in booking.passengers
            ],
        )
