from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, List, Optional

import attrs

from src.platform.exception.exceptions import (
    DomainError,
    InvalidStateError,
    NotFoundError,
    TimingViolationError,
    ValidationError,
)
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.enum.flight_status import BOOKABLE_FLIGHT_STATUSES, FlightStatus
from src.service.booking.domain.enum.seat_class import SeatClass
from src.service.booking.domain.value_object.flight_route import Aircraft, Airline, Route


@attrs.define
class Seat:
    seat_number: str
    seat_class: SeatClass
    price: Decimal
    is_available: bool = True
    is_blocked: bool = False
    row: int = 0
    column: str = ''
    features: List[str] = attrs.field(factory=list)

    @property
    def is_bookable(self) -> bool:
        # Blocked seats are never offered, whatever their availability flag says
        return self.is_available and not self.is_blocked


@attrs.define
class ClassFare:
    price: Decimal
    available_seats: int = 0


@attrs.define
class BookingStats:
    total_bookings: int = 0
    revenue: Decimal = Decimal('0')


@attrs.define
class Flight:
    """
    Flight aggregate: route, typed seat inventory, per-class fares and booking stats.

    `fares[c].available_seats` is a denormalized counter that must equal the number of
    bookable seats of class `c`. Seat mutations adjust it incrementally;
    `reconcile_available_seats()` recounts it exactly and is run before every write.
    """

    flight_number: str = attrs.field(converter=lambda v: v.strip().upper())
    airline: Airline
    aircraft: Aircraft
    route: Route
    seat_layout: str = '3-3'
    seats: List[Seat] = attrs.field(factory=list)
    fares: Dict[SeatClass, ClassFare] = attrs.field(factory=dict)
    booking_stats: BookingStats = attrs.field(factory=BookingStats)
    status: FlightStatus = FlightStatus.SCHEDULED
    is_active: bool = True
    version: int = 0
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def stored_id(self) -> int:
        if self.id is None:
            raise NotFoundError(f'Flight {self.flight_number} has not been stored')
        return self.id

    @property
    def departure_time(self) -> datetime:
        return self.route.departure.time

    @property
    def duration(self) -> timedelta:
        return self.route.duration

    @property
    def total_available_seats(self) -> int:
        return sum(fare.available_seats for fare in self.fares.values())

    def hours_until_departure(self, *, now: datetime) -> float:
        return (self.departure_time - now).total_seconds() / 3600

    # ------------------------------------------------------------------
    # Seat inventory
    # ------------------------------------------------------------------

    def find_seat(self, seat_number: str) -> Optional[Seat]:
        return next((seat for seat in self.seats if seat.seat_number == seat_number), None)

    def _require_seat(self, seat_number: str) -> Seat:
        seat = self.find_seat(seat_number)
        if seat is None:
            raise ValidationError(
                f'Seat {seat_number} does not exist on flight {self.flight_number}'
            )
        return seat

    def mark_seat_unavailable(self, seat_number: str) -> Seat:
        seat = self._require_seat(seat_number)
        if seat.is_bookable and (fare := self.fares.get(seat.seat_class)):
            fare.available_seats = max(0, fare.available_seats - 1)
        seat.is_available = False
        return seat

    def mark_seat_available(self, seat_number: str) -> Seat:
        seat = self._require_seat(seat_number)
        was_bookable = seat.is_bookable
        seat.is_available = True
        if not was_bookable and seat.is_bookable and (fare := self.fares.get(seat.seat_class)):
            fare.available_seats += 1
        return seat

    def count_bookable(self, seat_class: SeatClass) -> int:
        return sum(1 for seat in self.seats if seat.seat_class == seat_class and seat.is_bookable)

    def reconcile_available_seats(self) -> Dict[SeatClass, int]:
        """
        Recount every class counter from the seat list.

        Returns the drift per class (stored - actual) for counters that were wrong.
        """
        drift: Dict[SeatClass, int] = {}
        for seat_class, fare in self.fares.items():
            actual = self.count_bookable(seat_class)
            if fare.available_seats != actual:
                drift[seat_class] = fare.available_seats - actual
                fare.available_seats = actual
        if drift:
            Logger.base.warning(
                f'⚠️ [INVENTORY] Counter drift on flight {self.flight_number}: {dict(drift)}'
            )
        return drift

    # ------------------------------------------------------------------
    # Booking aggregates
    # ------------------------------------------------------------------

    def record_booking(self, *, amount: Decimal) -> None:
        self.booking_stats.total_bookings += 1
        self.booking_stats.revenue += amount

    def revert_booking(self, *, amount: Decimal) -> None:
        self.booking_stats.total_bookings = max(0, self.booking_stats.total_bookings - 1)
        self.booking_stats.revenue = max(Decimal('0'), self.booking_stats.revenue - amount)

    # ------------------------------------------------------------------
    # Eligibility
    # ------------------------------------------------------------------

    def ensure_bookable(self, *, now: datetime, cutoff_hours: float) -> None:
        if not self.is_active or self.status not in BOOKABLE_FLIGHT_STATUSES:
            raise InvalidStateError(f'Flight {self.flight_number} is not available for booking')

        hours_left = self.hours_until_departure(now=now)
        if hours_left <= 0:
            raise TimingViolationError(
                f'Flight {self.flight_number} has already departed and is no longer available for booking'
            )
        if hours_left < cutoff_hours:
            raise TimingViolationError(
                f'Booking closed - flight {self.flight_number} departs in less than '
                f'{cutoff_hours:g} hours'
            )

    def ensure_viewable(self, *, now: datetime) -> None:
        """Catalog views hide inactive flights and flights that already left"""
        if not self.is_active:
            raise DomainError('Flight is no longer available')
        if self.departure_time <= now:
            raise DomainError('Flight has already departed')

    def deactivate(self) -> 'Flight':
        return attrs.evolve(self, is_active=False)
