"""
Booking aggregate <-> booking row.

Nested records (passengers, contact, pricing, payment, check-in, cancellation) live in
JSON columns. Decimals are stored as strings and datetimes as ISO-8601 so the JSON
stays exact on every backend.
"""

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Optional

import attrs
from uuid_utils import UUID

from src.service.booking.domain.entity.booking_entity import (
    Booking,
    Cancellation,
    CheckInStatus,
    PaymentDetails,
)
from src.service.booking.domain.enum.booking_status import (
    BookingStatus,
    PaymentStatus,
    RefundStatus,
)
from src.service.booking.domain.enum.passenger_enum import (
    Gender,
    MealPreference,
    PassengerTitle,
    SpecialServiceType,
)
from src.service.booking.domain.enum.seat_class import SeatClass
from src.service.booking.domain.value_object.booking_pricing import BookingPricing
from src.service.booking.domain.value_object.passenger import (
    ContactDetails,
    EmergencyContact,
    Passenger,
    SpecialService,
)
from src.service.booking.driven_adapter.model.booking_model import BookingModel


def _serialize(_instance: Any, _field: Any, value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def to_json(record: Any) -> Any:
    if record is None:
        return None
    return attrs.asdict(record, value_serializer=_serialize)


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _to_passenger(data: dict) -> Passenger:
    return Passenger(
        title=PassengerTitle(data['title']),
        first_name=data['first_name'],
        last_name=data['last_name'],
        date_of_birth=date.fromisoformat(data['date_of_birth']),
        gender=Gender(data['gender']),
        nationality=data['nationality'],
        passport_number=data['passport_number'],
        seat_number=data['seat_number'],
        seat_class=SeatClass(data['seat_class']) if data.get('seat_class') else None,
        special_requests=data.get('special_requests'),
        meal_preference=MealPreference(data.get('meal_preference') or MealPreference.NONE),
    )


def _to_contact_details(data: dict) -> ContactDetails:
    emergency = data.get('emergency_contact')
    return ContactDetails(
        email=data['email'],
        phone=data['phone'],
        emergency_contact=EmergencyContact(**emergency) if emergency else None,
    )


def _to_cancellation(data: Optional[dict]) -> Optional[Cancellation]:
    if not data:
        return None
    return Cancellation(
        cancelled_at=datetime.fromisoformat(data['cancelled_at']),
        cancelled_by=data['cancelled_by'],
        reason=data['reason'],
        refund_amount=Decimal(data['refund_amount']),
        refund_status=RefundStatus(data['refund_status']),
        estimated_refund_at=_parse_datetime(data.get('estimated_refund_at')),
        is_cancelled=data.get('is_cancelled', True),
    )


def to_booking_entity(db_booking: BookingModel) -> Booking:
    pricing = db_booking.pricing
    payment = db_booking.payment
    check_in = db_booking.check_in
    return Booking(
        # Stored as stdlib uuid.UUID; the entity uses uuid_utils.UUID
        id=UUID(str(db_booking.id)),
        booking_id=db_booking.booking_id,
        pnr=db_booking.pnr,
        confirmation_code=db_booking.confirmation_code,
        user_id=db_booking.user_id,
        flight_id=db_booking.flight_id,
        status=BookingStatus(db_booking.status),
        passengers=[_to_passenger(data) for data in db_booking.passengers],
        contact_details=_to_contact_details(db_booking.contact_details),
        special_services=[
            SpecialService(
                type=SpecialServiceType(data['type']),
                price=Decimal(data['price']),
                description=data.get('description'),
            )
            for data in db_booking.special_services or []
        ],
        pricing=BookingPricing(
            base_price=Decimal(pricing['base_price']),
            taxes=Decimal(pricing['taxes']),
            fees=Decimal(pricing['fees']),
            total_amount=Decimal(pricing['total_amount']),
            currency=pricing.get('currency', 'USD'),
        ),
        payment=PaymentDetails(
            method=payment.get('method', 'mock'),
            status=PaymentStatus(payment['status']),
            transaction_id=payment.get('transaction_id'),
            paid_at=_parse_datetime(payment.get('paid_at')),
        ),
        check_in=CheckInStatus(
            is_checked_in=check_in.get('is_checked_in', False),
            checked_in_at=_parse_datetime(check_in.get('checked_in_at')),
            boarding_pass_generated=check_in.get('boarding_pass_generated', False),
        ),
        cancellation=_to_cancellation(db_booking.cancellation),
        email_sent=db_booking.email_sent,
        created_at=db_booking.created_at,
        updated_at=db_booking.updated_at,
    )


def to_booking_model(booking: Booking) -> BookingModel:
    return BookingModel(
        id=uuid.UUID(str(booking.id)),
        booking_id=booking.booking_id,
        pnr=booking.pnr,
        confirmation_code=booking.confirmation_code,
        user_id=booking.user_id,
        flight_id=booking.flight_id,
        status=booking.status.value,
        passengers=[to_json(passenger) for passenger in booking.passengers],
        contact_details=to_json(booking.contact_details),
        special_services=[to_json(service) for service in booking.special_services],
        pricing=to_json(booking.pricing),
        total_amount=booking.pricing.total_amount,
        payment=to_json(booking.payment),
        is_checked_in=booking.check_in.is_checked_in,
        check_in=to_json(booking.check_in),
        cancellation=to_json(booking.cancellation),
        email_sent=booking.email_sent,
        created_at=booking.created_at or datetime.now(timezone.utc),
        updated_at=booking.updated_at or datetime.now(timezone.utc),
    )
