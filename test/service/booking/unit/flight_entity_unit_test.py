from datetime import timedelta
from decimal import Decimal

import pytest

from src.platform.exception.exceptions import (
    DomainError,
    InvalidStateError,
    NotFoundError,
    TimingViolationError,
    ValidationError,
)
from src.service.booking.domain.enum.flight_status import FlightStatus
from src.service.booking.domain.enum.seat_class import SeatClass
from test.service.booking.fixtures import (
    BUSINESS_SEAT,
    ECONOMY_SEAT,
    NOW,
    make_flight,
)


# 12 rows of a 3-3 cabin: 3 first, 5 business, 4 economy rows
ECONOMY_SEATS = 24
BUSINESS_SEATS = 30
FIRST_SEATS = 18


@pytest.mark.unit
class TestSeatInventory:
    def test_new_flight_counters_match_seat_map(self):
        flight = make_flight()

        assert flight.fares[SeatClass.ECONOMY].available_seats == ECONOMY_SEATS
        assert flight.fares[SeatClass.BUSINESS].available_seats == BUSINESS_SEATS
        assert flight.fares[SeatClass.FIRST].available_seats == FIRST_SEATS
        assert flight.total_available_seats == ECONOMY_SEATS + BUSINESS_SEATS + FIRST_SEATS

    def test_mark_unavailable_decrements_class_counter(self):
        flight = make_flight()

        flight.mark_seat_unavailable(ECONOMY_SEAT)

        assert flight.find_seat(ECONOMY_SEAT).is_available is False
        assert flight.fares[SeatClass.ECONOMY].available_seats == ECONOMY_SEATS - 1
        assert flight.fares[SeatClass.BUSINESS].available_seats == BUSINESS_SEATS

    def test_mark_unavailable_twice_only_counts_once(self):
        flight = make_flight()

        flight.mark_seat_unavailable(ECONOMY_SEAT)
        flight.mark_seat_unavailable(ECONOMY_SEAT)

        assert flight.fares[SeatClass.ECONOMY].available_seats == ECONOMY_SEATS - 1

    def test_mark_available_restores_counter(self):
        flight = make_flight()
        flight.mark_seat_unavailable(BUSINESS_SEAT)

        flight.mark_seat_available(BUSINESS_SEAT)

        assert flight.find_seat(BUSINESS_SEAT).is_bookable
        assert flight.fares[SeatClass.BUSINESS].available_seats == BUSINESS_SEATS

    def test_blocked_seat_stays_out_of_counter_when_released(self):
        flight = make_flight()
        flight.mark_seat_unavailable(ECONOMY_SEAT)
        flight.find_seat(ECONOMY_SEAT).is_blocked = True

        flight.mark_seat_available(ECONOMY_SEAT)

        assert flight.find_seat(ECONOMY_SEAT).is_bookable is False
        assert flight.fares[SeatClass.ECONOMY].available_seats == ECONOMY_SEATS - 1

    def test_unknown_seat_rejected(self):
        flight = make_flight()

        with pytest.raises(ValidationError):
            flight.mark_seat_unavailable('99Z')

    def test_reconcile_fixes_drift(self):
        flight = make_flight()
        flight.find_seat(ECONOMY_SEAT).is_available = False
        flight.fares[SeatClass.ECONOMY].available_seats = 40

        drift = flight.reconcile_available_seats()

        assert drift == {SeatClass.ECONOMY: 40 - (ECONOMY_SEATS - 1)}
        assert flight.fares[SeatClass.ECONOMY].available_seats == ECONOMY_SEATS - 1

    def test_reconcile_without_drift_is_empty(self):
        assert make_flight().reconcile_available_seats() == {}


@pytest.mark.unit
class TestBookingStats:
    def test_record_and_revert(self):
        flight = make_flight()

        flight.record_booking(amount=Decimal('245'))
        flight.record_booking(amount=Decimal('575'))
        flight.revert_booking(amount=Decimal('245'))

        assert flight.booking_stats.total_bookings == 1
        assert flight.booking_stats.revenue == Decimal('575')

    def test_revert_never_goes_negative(self):
        flight = make_flight()

        flight.revert_booking(amount=Decimal('245'))

        assert flight.booking_stats.total_bookings == 0
        assert flight.booking_stats.revenue == Decimal('0')


@pytest.mark.unit
class TestEligibility:
    def test_bookable_well_before_departure(self):
        make_flight(departure_time=NOW + timedelta(days=3)).ensure_bookable(
            now=NOW, cutoff_hours=2
        )

    def test_inside_cutoff_rejected(self):
        flight = make_flight(departure_time=NOW + timedelta(hours=1))

        with pytest.raises(TimingViolationError, match='less than 2 hours'):
            flight.ensure_bookable(now=NOW, cutoff_hours=2)

    def test_departed_rejected(self):
        flight = make_flight(departure_time=NOW - timedelta(minutes=5))

        with pytest.raises(TimingViolationError, match='already departed'):
            flight.ensure_bookable(now=NOW, cutoff_hours=2)

    def test_inactive_rejected(self):
        flight = make_flight().deactivate()

        with pytest.raises(InvalidStateError):
            flight.ensure_bookable(now=NOW, cutoff_hours=2)

    @pytest.mark.parametrize(
        'status', [FlightStatus.CANCELLED, FlightStatus.DEPARTED, FlightStatus.DELAYED]
    )
    def test_non_bookable_status_rejected(self, status: FlightStatus):
        flight = make_flight()
        flight.status = status

        with pytest.raises(InvalidStateError):
            flight.ensure_bookable(now=NOW, cutoff_hours=2)

    def test_boarding_flight_is_bookable(self):
        flight = make_flight()
        flight.status = FlightStatus.BOARDING

        flight.ensure_bookable(now=NOW, cutoff_hours=2)

    def test_departed_flight_not_viewable(self):
        flight = make_flight(departure_time=NOW - timedelta(hours=1))

        with pytest.raises(DomainError, match='already departed'):
            flight.ensure_viewable(now=NOW)

    def test_inactive_flight_not_viewable(self):
        with pytest.raises(DomainError, match='no longer available'):
            make_flight().deactivate().ensure_viewable(now=NOW)


@pytest.mark.unit
def test_flight_number_is_normalized():
    assert make_flight(flight_number=' fb101 ').flight_number == 'FB101'


@pytest.mark.unit
def test_stored_id_requires_persisted_flight():
    assert make_flight(flight_id=7).stored_id == 7

    with pytest.raises(NotFoundError, match='FB101 has not been stored'):
        make_flight(flight_id=None).stored_id
