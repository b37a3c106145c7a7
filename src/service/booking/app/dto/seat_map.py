from typing import Dict, List

import attrs

from src.service.booking.domain.entity.flight_entity import ClassFare, Flight, Seat
from src.service.booking.domain.enum.seat_class import SeatClass


@attrs.define(frozen=True)
class SeatMap:
    flight_id: int
    flight_number: str
    seat_layout: str
    seats_by_class: Dict[SeatClass, List[Seat]]
    fares: Dict[SeatClass, ClassFare]
    total_available_seats: int

    @classmethod
    def of(cls, *, flight: Flight) -> 'SeatMap':
        seats_by_class: Dict[SeatClass, List[Seat]] = {}
        for seat in flight.seats:
            seats_by_class.setdefault(seat.seat_class, []).append(seat)
        for seats in seats_by_class.values():
            seats.sort(key=lambda seat: (seat.row, seat.column))

        return cls(
            flight_id=flight.stored_id,
            flight_number=flight.flight_number,
            seat_layout=flight.seat_layout,
            seats_by_class=seats_by_class,
            fares=flight.fares,
            total_available_seats=flight.total_available_seats,
        )
