from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from src.platform.exception.exceptions import InvalidStateError
from src.platform.types.uuid7_utils_types import UtilsUUID7
from src.service.booking.app.dto.boarding_pass import BoardingPass
from src.service.booking.app.dto.booking_view import BookingView
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.entity.flight_entity import Flight
from src.service.booking.domain.enum.booking_status import (
    BookingStatus,
    PaymentStatus,
    RefundStatus,
)
from src.service.booking.domain.enum.flight_status import FlightStatus
from src.service.booking.domain.enum.passenger_enum import (
    Gender,
    MealPreference,
    PassengerTitle,
    SpecialServiceType,
)
from src.service.booking.domain.enum.seat_class import SeatClass
from src.service.booking.domain.value_object.passenger import (
    ContactDetails,
    EmergencyContact,
    Passenger,
    SpecialService,
)
from src.service.booking.driving_adapter.http_controller.schema.common_schema import (
    Money,
    PaginationResponse,
)


# ============================ Requests ============================


class PassengerRequest(BaseModel):
    title: PassengerTitle
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    date_of_birth: date
    gender: Gender
    nationality: str
    passport_number: str
    seat_number: Optional[str] = None
    special_requests: Optional[str] = Field(None, max_length=500)
    meal_preference: MealPreference = MealPreference.NONE

    def to_value_object(self) -> Passenger:
        return Passenger(
            title=self.title,
            first_name=self.first_name.strip(),
            last_name=self.last_name.strip(),
            date_of_birth=self.date_of_birth,
            gender=self.gender,
            nationality=self.nationality,
            passport_number=self.passport_number.strip().upper(),
            seat_number=(self.seat_number or '').strip().upper(),
            special_requests=self.special_requests,
            meal_preference=self.meal_preference,
        )


class EmergencyContactRequest(BaseModel):
    name: str
    phone: str
    relationship: Optional[str] = None


class ContactDetailsRequest(BaseModel):
    email: str = ''
    phone: Optional[str] = None
    emergency_contact: Optional[EmergencyContactRequest] = None

    def to_value_object(self) -> ContactDetails:
        emergency = self.emergency_contact
        return ContactDetails.build(
            email=self.email,
            phone=self.phone,
            emergency_contact=EmergencyContact(
                name=emergency.name, phone=emergency.phone, relationship=emergency.relationship
            )
            if emergency
            else None,
        )


class SpecialServiceRequest(BaseModel):
    type: SpecialServiceType
    description: Optional[str] = None
    price: Decimal = Decimal('0')

    def to_value_object(self) -> SpecialService:
        return SpecialService(type=self.type, price=self.price, description=self.description)


class BookingCreateRequest(BaseModel):
    flight_id: int
    passengers: List[PassengerRequest] = []
    contact_details: Optional[ContactDetailsRequest] = None
    selected_seats: Optional[List[str]] = None
    special_services: List[SpecialServiceRequest] = []

    model_config = {
        'json_schema_extra': {
            'example': {
                'flight_id': 1,
                'passengers': [
                    {
                        'title': 'Ms',
                        'first_name': 'Jane',
                        'last_name': 'Doe',
                        'date_of_birth': '1990-04-12',
                        'gender': 'female',
                        'nationality': 'US',
                        'passport_number': 'X1234567',
                        'seat_number': '10A',
                    }
                ],
                'contact_details': {'email': 'jane@example.com', 'phone': '555-0100'},
                'special_services': [],
            }
        }
    }


class CancelBookingRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


# ============================ Responses ============================


class PassengerResponse(BaseModel):
    title: PassengerTitle
    first_name: str
    last_name: str
    date_of_birth: date
    gender: Gender
    nationality: str
    seat_number: str
    seat_class: Optional[SeatClass] = None
    special_requests: Optional[str] = None
    meal_preference: MealPreference


class ContactDetailsResponse(BaseModel):
    email: str
    phone: str
    emergency_contact: Optional[EmergencyContactRequest] = None


class SpecialServiceResponse(BaseModel):
    type: SpecialServiceType
    description: Optional[str] = None
    price: Money


class PricingResponse(BaseModel):
    base_price: Money
    taxes: Money
    fees: Money
    total_amount: Money
    currency: str


class PaymentResponse(BaseModel):
    method: str
    status: PaymentStatus
    transaction_id: Optional[str] = None
    paid_at: Optional[datetime] = None


class CheckInResponse(BaseModel):
    is_checked_in: bool
    checked_in_at: Optional[datetime] = None
    boarding_pass_generated: bool


class CancellationResponse(BaseModel):
    cancelled_at: datetime
    cancelled_by: int
    reason: str
    refund_amount: Money
    refund_status: RefundStatus
    estimated_refund_at: Optional[datetime] = None


class FlightSummaryResponse(BaseModel):
    id: int
    flight_number: str
    airline: str
    departure_airport: str
    departure_city: str
    departure_time: datetime
    arrival_airport: str
    arrival_city: str
    arrival_time: datetime
    status: FlightStatus

    @classmethod
    def from_entity(cls, flight: Flight) -> 'FlightSummaryResponse':
        departure, arrival = flight.route.departure, flight.route.arrival
        return cls(
            id=flight.stored_id,
            flight_number=flight.flight_number,
            airline=flight.airline.name,
            departure_airport=departure.airport_code,
            departure_city=departure.city,
            departure_time=departure.time,
            arrival_airport=arrival.airport_code,
            arrival_city=arrival.city,
            arrival_time=arrival.time,
            status=flight.status,
        )


class BookingResponse(BaseModel):
    id: UtilsUUID7  # UUID7
    booking_id: str
    pnr: str
    confirmation_code: Optional[str] = None
    user_id: int
    status: BookingStatus
    flight: Optional[FlightSummaryResponse] = None
    passengers: List[PassengerResponse]
    contact_details: ContactDetailsResponse
    special_services: List[SpecialServiceResponse]
    pricing: PricingResponse
    payment: PaymentResponse
    check_in: CheckInResponse
    cancellation: Optional[CancellationResponse] = None
    email_sent: bool
    can_be_cancelled: bool
    created_at: Optional[datetime] = None

    @classmethod
    def from_view(cls, view: BookingView, *, now: datetime) -> 'BookingResponse':
        booking, flight = view.booking, view.flight
        emergency = booking.contact_details.emergency_contact
        cancellation = booking.cancellation
        return cls(
            id=booking.id,
            booking_id=booking.booking_id,
            pnr=booking.pnr,
            confirmation_code=booking.confirmation_code,
            user_id=booking.user_id,
            status=booking.status,
            flight=FlightSummaryResponse.from_entity(flight) if flight else None,
            passengers=[
                PassengerResponse(
                    title=passenger.title,
                    first_name=passenger.first_name,
                    last_name=passenger.last_name,
                    date_of_birth=passenger.date_of_birth,
                    gender=passenger.gender,
                    nationality=passenger.nationality,
                    seat_number=passenger.seat_number,
                    seat_class=passenger.seat_class,
                    special_requests=passenger.special_requests,
                    meal_preference=passenger.meal_preference,
                )
                for passenger in booking.passengers
            ],
            contact_details=ContactDetailsResponse(
                email=booking.contact_details.email,
                phone=booking.contact_details.phone,
                emergency_contact=EmergencyContactRequest(
                    name=emergency.name, phone=emergency.phone, relationship=emergency.relationship
                )
                if emergency
                else None,
            ),
            special_services=[
                SpecialServiceResponse(
                    type=service.type, description=service.description, price=service.price
                )
                for service in booking.special_services
            ],
            pricing=PricingResponse(
                base_price=booking.pricing.base_price,
                taxes=booking.pricing.taxes,
                fees=booking.pricing.fees,
                total_amount=booking.pricing.total_amount,
                currency=booking.pricing.currency,
            ),
            payment=PaymentResponse(
                method=booking.payment.method,
                status=booking.payment.status,
                transaction_id=booking.payment.transaction_id,
                paid_at=booking.payment.paid_at,
            ),
            check_in=CheckInResponse(
                is_checked_in=booking.check_in.is_checked_in,
                checked_in_at=booking.check_in.checked_in_at,
                boarding_pass_generated=booking.check_in.boarding_pass_generated,
            ),
            cancellation=CancellationResponse(
                cancelled_at=cancellation.cancelled_at,
                cancelled_by=cancellation.cancelled_by,
                reason=cancellation.reason,
                refund_amount=cancellation.refund_amount,
                refund_status=cancellation.refund_status,
                estimated_refund_at=cancellation.estimated_refund_at,
            )
            if cancellation
            else None,
            email_sent=booking.email_sent,
            can_be_cancelled=flight is not None
            and booking.can_be_cancelled(departure_time=flight.departure_time, now=now),
            created_at=booking.created_at,
        )


class BookingListResponse(BaseModel):
    bookings: List[BookingResponse]
    pagination: PaginationResponse


class CancelBookingResponse(BaseModel):
    booking_id: str
    status: BookingStatus
    refund_amount: Money
    refund_status: RefundStatus
    estimated_refund_at: Optional[datetime] = None
    cancelled_at: datetime

    @classmethod
    def from_entity(cls, booking: Booking) -> 'CancelBookingResponse':
        cancellation = booking.cancellation
        if cancellation is None:
            raise InvalidStateError(f'Booking {booking.booking_id} is not cancelled')
        return cls(
            booking_id=booking.booking_id,
            status=booking.status,
            refund_amount=cancellation.refund_amount,
            refund_status=cancellation.refund_status,
            estimated_refund_at=cancellation.estimated_refund_at,
            cancelled_at=cancellation.cancelled_at,
        )


class BoardingPassPassengerResponse(BaseModel):
    name: str
    seat_number: str
    seat_class: SeatClass


class BoardingPassResponse(BaseModel):
    booking_id: str
    pnr: str
    flight_number: str
    departure_airport: str
    arrival_airport: str
    departure_time: datetime
    gate: Optional[str] = None
    terminal: Optional[str] = None
    checked_in_at: datetime
    passengers: List[BoardingPassPassengerResponse]

    @classmethod
    def from_dto(cls, boarding_pass: BoardingPass) -> 'BoardingPassResponse':
        return cls(
            booking_id=boarding_pass.booking_id,
            pnr=boarding_pass.pnr,
            flight_number=boarding_pass.flight_number,
            departure_airport=boarding_pass.departure_airport,
            arrival_airport=boarding_pass.arrival_airport,
            departure_time=boarding_pass.departure_time,
            gate=boarding_pass.gate,
            terminal=boarding_pass.terminal,
            checked_in_at=boarding_pass.checked_in_at,
            passengers=[
                BoardingPassPassengerResponse(
                    name=passenger.name,
                    seat_number=passenger.seat_number,
                    seat_class=passenger.seat_class,
                )
                for passenger in boarding_pass.passengers
            ],
        )


class PnrFlightResponse(BaseModel):
    flight_number: str
    airline: str
    departure_airport: str
    departure_time: datetime
    arrival_airport: str
    arrival_time: datetime
    status: FlightStatus


class PnrPassengerResponse(BaseModel):
    name: str
    seat_number: str
    seat_class: Optional[SeatClass] = None


class PnrLookupResponse(BaseModel):
    """Public projection: no contact, payment or document details"""

    booking_id: str
    pnr: str
    status: BookingStatus
    flight: Optional[PnrFlightResponse] = None
    passengers: List[PnrPassengerResponse]
    is_checked_in: bool

    @classmethod
    def from_view(cls, view: BookingView) -> 'PnrLookupResponse':
        booking, flight = view.booking, view.flight
        return cls(
            booking_id=booking.booking_id,
            pnr=booking.pnr,
            status=booking.status,
            flight=PnrFlightResponse(
                flight_number=flight.flight_number,
                airline=flight.airline.name,
                departure_airport=flight.route.departure.airport_code,
                departure_time=flight.route.departure.time,
                arrival_airport=flight.route.arrival.airport_code,
                arrival_time=flight.route.arrival.time,
                status=flight.status,
            )
            if flight
            else None,
            passengers=[
                PnrPassengerResponse(
                    name=passenger.full_name,
                    seat_number=passenger.seat_number,
                    seat_class=passenger.seat_class,
                )
                for passenger in booking.passengers
            ],
            is_checked_in=booking.check_in.is_checked_in,
        )
