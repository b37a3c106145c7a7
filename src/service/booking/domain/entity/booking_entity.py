from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional

import attrs
from uuid_utils import UUID

from src.platform.exception.exceptions import (
    ForbiddenError,
    InvalidStateError,
    TimingViolationError,
    ValidationError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.types.uuid7_utils_types import new_uuid7
from src.service.booking.domain.enum.booking_status import (
    BookingStatus,
    PaymentStatus,
    RefundStatus,
)
from src.service.booking.domain.service.pricing_calculator import round_half_up
from src.service.booking.domain.service.reference_generator import ReferenceGenerator
from src.service.booking.domain.value_object.booking_pricing import BookingPricing
from src.service.booking.domain.value_object.passenger import (
    ContactDetails,
    Passenger,
    SpecialService,
)


# Informational buffer behind `can_be_cancelled`
CANCELLABLE_BEFORE_DEPARTURE_HOURS = 2


@attrs.define(frozen=True)
class PaymentDetails:
    method: str = 'mock'
    status: PaymentStatus = PaymentStatus.PENDING
    transaction_id: Optional[str] = None
    paid_at: Optional[datetime] = None


@attrs.define(frozen=True)
class CheckInStatus:
    is_checked_in: bool = False
    checked_in_at: Optional[datetime] = None
    boarding_pass_generated: bool = False


@attrs.define(frozen=True)
class Cancellation:
    cancelled_at: datetime
    cancelled_by: int
    reason: str
    refund_amount: Decimal
    refund_status: RefundStatus = RefundStatus.PENDING
    estimated_refund_at: Optional[datetime] = None
    is_cancelled: bool = True


@attrs.define
class Booking:
    booking_id: str
    pnr: str
    user_id: int
    flight_id: int
    passengers: List[Passenger]
    contact_details: ContactDetails
    pricing: BookingPricing
    special_services: List[SpecialService] = attrs.field(factory=list)
    payment: PaymentDetails = attrs.field(factory=PaymentDetails)
    status: BookingStatus = BookingStatus.CONFIRMED
    check_in: CheckInStatus = attrs.field(factory=CheckInStatus)
    cancellation: Optional[Cancellation] = None
    confirmation_code: Optional[str] = None
    email_sent: bool = False
    id: UUID = attrs.field(factory=new_uuid7)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def seat_numbers(self) -> List[str]:
        return [passenger.seat_number for passenger in self.passengers]

    @property
    def is_cancelled(self) -> bool:
        return self.cancellation is not None and self.cancellation.is_cancelled

    @staticmethod
    def validate_request(
        *, passengers: List[Passenger], contact_details: Optional[ContactDetails]
    ) -> ContactDetails:
        """Reject malformed requests; returns the (required) contact details."""
        if not passengers:
            raise ValidationError('At least one passenger is required')
        if contact_details is None or not contact_details.email:
            raise ValidationError('Contact email is required')

        seat_numbers = [passenger.seat_number for passenger in passengers]
        if any(not seat_number for seat_number in seat_numbers):
            raise ValidationError('Every passenger must be assigned a seat')
        duplicates = sorted({s for s in seat_numbers if seat_numbers.count(s) > 1})
        if duplicates:
            raise ValidationError(f'Seats requested more than once: {", ".join(duplicates)}')
        return contact_details

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        user_id: int,
        flight_id: int,
        passengers: List[Passenger],
        contact_details: ContactDetails,
        pricing: BookingPricing,
        special_services: Optional[List[SpecialService]] = None,
        references: ReferenceGenerator,
        now: datetime,
    ) -> 'Booking':
        """
        Build a confirmed booking with freshly generated booking id and PNR.

        Passengers must already carry the seat class of their seat on the flight.
        """
        cls.validate_request(passengers=passengers, contact_details=contact_details)
        return cls(
            booking_id=references.booking_id(),
            pnr=references.pnr(),
            user_id=user_id,
            flight_id=flight_id,
            passengers=list(passengers),
            contact_details=contact_details,
            pricing=pricing,
            special_services=list(special_services or []),
            status=BookingStatus.CONFIRMED,
            created_at=now,
            updated_at=now,
        )

    def ensure_confirmation_code(self, *, references: ReferenceGenerator) -> 'Booking':
        # Generated once, never regenerated
        if self.confirmation_code:
            return self
        return attrs.evolve(self, confirmation_code=references.confirmation_code())

    def complete_mock_payment(self, *, references: ReferenceGenerator, now: datetime) -> 'Booking':
        return attrs.evolve(
            self,
            payment=PaymentDetails(
                method='mock',
                status=PaymentStatus.COMPLETED,
                transaction_id=references.transaction_id(),
                paid_at=now,
            ),
        )

    def ensure_owned_by(self, *, user_id: int, action: str) -> None:
        if self.user_id != user_id:
            raise ForbiddenError(f'Only the booking owner can {action} this booking')

    @Logger.io
    def cancel(
        self,
        *,
        cancelled_by: int,
        now: datetime,
        refund_percentage: Decimal,
        refund_delay: timedelta,
        reason: Optional[str] = None,
    ) -> 'Booking':
        if self.status == BookingStatus.CANCELLED or self.is_cancelled:
            raise InvalidStateError(f'Booking {self.booking_id} is already cancelled')

        cancellation = Cancellation(
            cancelled_at=now,
            cancelled_by=cancelled_by,
            reason=reason or 'Cancelled by user',
            refund_amount=round_half_up(self.pricing.total_amount * refund_percentage),
            refund_status=RefundStatus.PENDING,
            estimated_refund_at=now + refund_delay,
        )
        return attrs.evolve(
            self, status=BookingStatus.CANCELLED, cancellation=cancellation, updated_at=now
        )

    @Logger.io
    def check_in(
        self, *, departure_time: datetime, now: datetime, window_hours: float
    ) -> 'Booking':
        if self.status != BookingStatus.CONFIRMED:
            raise InvalidStateError(f'Only confirmed bookings can be checked in ({self.status})')
        if self.check_in.is_checked_in:
            raise InvalidStateError(f'Booking {self.booking_id} is already checked in')

        hours_left = (departure_time - now).total_seconds() / 3600
        if hours_left < 0:
            raise TimingViolationError('Flight has already departed')
        if hours_left > window_hours:
            raise TimingViolationError(
                f'Check-in opens {window_hours:g} hours before departure'
            )

        return attrs.evolve(
            self,
            check_in=CheckInStatus(
                is_checked_in=True, checked_in_at=now, boarding_pass_generated=True
            ),
            updated_at=now,
        )

    def can_be_cancelled(self, *, departure_time: datetime, now: datetime) -> bool:
        if self.status == BookingStatus.CANCELLED:
            return False
        hours_left = (departure_time - now).total_seconds() / 3600
        return hours_left > CANCELLABLE_BEFORE_DEPARTURE_HOURS
