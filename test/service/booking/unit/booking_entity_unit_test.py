from datetime import timedelta
from decimal import Decimal

import attrs
import pytest

from src.platform.exception.exceptions import (
    ForbiddenError,
    InvalidStateError,
    TimingViolationError,
    ValidationError,
)
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.enum.booking_status import (
    BookingStatus,
    PaymentStatus,
    RefundStatus,
)
from src.service.booking.domain.service.reference_generator import ReferenceGenerator
from src.service.booking.domain.value_object.passenger import ContactDetails
from test.constants import (
    ANOTHER_CUSTOMER_ID,
    EXPECTED_ECONOMY_REFUND,
    EXPECTED_ECONOMY_TOTAL,
    TEST_CUSTOMER_ID,
)
from test.service.booking.fixtures import (
    NOW,
    make_booking,
    make_contact,
    make_flight,
    make_passenger,
)


REFUND_PERCENTAGE = Decimal('0.80')
REFUND_DELAY = timedelta(hours=12)


@pytest.mark.unit
class TestCreate:
    def test_new_booking_is_confirmed_and_paid(self):
        booking = make_booking(flight=make_flight())

        assert booking.status == BookingStatus.CONFIRMED
        assert booking.pricing.total_amount == Decimal(EXPECTED_ECONOMY_TOTAL)
        assert booking.payment.status == PaymentStatus.COMPLETED
        assert booking.payment.transaction_id.startswith('TXN')
        assert booking.payment.paid_at == NOW
        assert booking.booking_id.startswith('FB')
        assert len(booking.pnr) == 6
        assert len(booking.confirmation_code) == 8
        assert booking.email_sent is False

    def test_confirmation_code_generated_once(self):
        booking = make_booking(flight=make_flight())

        again = booking.ensure_confirmation_code(references=ReferenceGenerator())

        assert again.confirmation_code == booking.confirmation_code


@pytest.mark.unit
class TestValidateRequest:
    def test_no_passengers(self):
        with pytest.raises(ValidationError, match='At least one passenger'):
            Booking.validate_request(passengers=[], contact_details=make_contact())

    @pytest.mark.parametrize('contact', [None, ContactDetails.build(email='  ')])
    def test_missing_contact_email(self, contact):
        with pytest.raises(ValidationError, match='Contact email'):
            Booking.validate_request(passengers=[make_passenger()], contact_details=contact)

    def test_passenger_without_seat(self):
        with pytest.raises(ValidationError, match='assigned a seat'):
            Booking.validate_request(
                passengers=[make_passenger(seat_number='')], contact_details=make_contact()
            )

    def test_duplicate_seats(self):
        with pytest.raises(ValidationError, match='10A'):
            Booking.validate_request(
                passengers=[make_passenger(), make_passenger(first_name='John')],
                contact_details=make_contact(),
            )

    def test_returns_contact_details(self):
        contact = make_contact()

        assert (
            Booking.validate_request(passengers=[make_passenger()], contact_details=contact)
            is contact
        )


@pytest.mark.unit
class TestCancel:
    def test_cancel_refunds_eighty_percent(self):
        booking = make_booking(flight=make_flight())

        cancelled = booking.cancel(
            cancelled_by=TEST_CUSTOMER_ID,
            now=NOW,
            refund_percentage=REFUND_PERCENTAGE,
            refund_delay=REFUND_DELAY,
        )

        assert cancelled.status == BookingStatus.CANCELLED
        assert cancelled.is_cancelled
        assert cancelled.cancellation.refund_amount == Decimal(EXPECTED_ECONOMY_REFUND)
        assert cancelled.cancellation.refund_status == RefundStatus.PENDING
        assert cancelled.cancellation.estimated_refund_at == NOW + REFUND_DELAY
        assert cancelled.cancellation.reason == 'Cancelled by user'
        assert cancelled.cancellation.cancelled_by == TEST_CUSTOMER_ID
        # The original snapshot is untouched
        assert booking.status == BookingStatus.CONFIRMED

    def test_cancel_keeps_given_reason(self):
        cancelled = make_booking(flight=make_flight()).cancel(
            cancelled_by=TEST_CUSTOMER_ID,
            now=NOW,
            refund_percentage=REFUND_PERCENTAGE,
            refund_delay=REFUND_DELAY,
            reason='Change of plans',
        )

        assert cancelled.cancellation.reason == 'Change of plans'

    def test_second_cancel_rejected(self):
        cancelled = make_booking(flight=make_flight()).cancel(
            cancelled_by=TEST_CUSTOMER_ID,
            now=NOW,
            refund_percentage=REFUND_PERCENTAGE,
            refund_delay=REFUND_DELAY,
        )

        with pytest.raises(InvalidStateError, match='already cancelled'):
            cancelled.cancel(
                cancelled_by=TEST_CUSTOMER_ID,
                now=NOW,
                refund_percentage=REFUND_PERCENTAGE,
                refund_delay=REFUND_DELAY,
            )

    def test_owner_check(self):
        booking = make_booking(flight=make_flight())

        booking.ensure_owned_by(user_id=TEST_CUSTOMER_ID, action='cancel')
        with pytest.raises(ForbiddenError):
            booking.ensure_owned_by(user_id=ANOTHER_CUSTOMER_ID, action='cancel')


@pytest.mark.unit
class TestCheckIn:
    def test_check_in_inside_window(self):
        booking = make_booking(flight=make_flight())

        checked_in = booking.check_in(
            departure_time=NOW + timedelta(hours=10), now=NOW, window_hours=24
        )

        assert checked_in.check_in.is_checked_in
        assert checked_in.check_in.checked_in_at == NOW
        assert checked_in.check_in.boarding_pass_generated

    def test_check_in_too_early(self):
        booking = make_booking(flight=make_flight())

        with pytest.raises(TimingViolationError, match='24 hours before departure'):
            booking.check_in(departure_time=NOW + timedelta(hours=30), now=NOW, window_hours=24)

    def test_check_in_after_departure(self):
        booking = make_booking(flight=make_flight())

        with pytest.raises(TimingViolationError, match='already departed'):
            booking.check_in(departure_time=NOW - timedelta(hours=1), now=NOW, window_hours=24)

    @pytest.mark.parametrize(
        'until_departure',
        [timedelta(hours=24), timedelta(0)],
        ids=['window_opens', 'at_departure'],
    )
    def test_window_edges_are_inclusive(self, until_departure: timedelta):
        booking = make_booking(flight=make_flight())

        checked_in = booking.check_in(
            departure_time=NOW + until_departure, now=NOW, window_hours=24
        )

        assert checked_in.check_in.is_checked_in

    @pytest.mark.parametrize(
        'until_departure,message',
        [
            (timedelta(hours=24, seconds=1), '24 hours before departure'),
            (timedelta(seconds=-1), 'already departed'),
        ],
        ids=['before_window', 'just_departed'],
    )
    def test_just_outside_window(self, until_departure: timedelta, message: str):
        booking = make_booking(flight=make_flight())

        with pytest.raises(TimingViolationError, match=message):
            booking.check_in(departure_time=NOW + until_departure, now=NOW, window_hours=24)

    def test_check_in_twice_rejected(self):
        checked_in = make_booking(flight=make_flight()).check_in(
            departure_time=NOW + timedelta(hours=10), now=NOW, window_hours=24
        )

        with pytest.raises(InvalidStateError, match='already checked in'):
            checked_in.check_in(departure_time=NOW + timedelta(hours=10), now=NOW, window_hours=24)

    def test_cancelled_booking_cannot_check_in(self):
        cancelled = make_booking(flight=make_flight()).cancel(
            cancelled_by=TEST_CUSTOMER_ID,
            now=NOW,
            refund_percentage=REFUND_PERCENTAGE,
            refund_delay=REFUND_DELAY,
        )

        with pytest.raises(InvalidStateError):
            cancelled.check_in(departure_time=NOW + timedelta(hours=10), now=NOW, window_hours=24)


@pytest.mark.unit
class TestCanBeCancelled:
    @pytest.mark.parametrize('hours,expected', [(48, True), (3, True), (2, False), (1, False)])
    def test_departure_buffer(self, hours: int, expected: bool):
        booking = make_booking(flight=make_flight())

        assert (
            booking.can_be_cancelled(departure_time=NOW + timedelta(hours=hours), now=NOW)
            is expected
        )

    def test_cancelled_booking(self):
        booking = attrs.evolve(make_booking(flight=make_flight()), status=BookingStatus.CANCELLED)

        assert booking.can_be_cancelled(departure_time=NOW + timedelta(days=3), now=NOW) is False
