from datetime import date
from decimal import Decimal
from typing import Optional

import attrs

from src.service.booking.domain.enum.passenger_enum import (
    Gender,
    MealPreference,
    PassengerTitle,
    SpecialServiceType,
)
from src.service.booking.domain.enum.seat_class import SeatClass


DEFAULT_CONTACT_PHONE = '000-000-0000'


@attrs.define(frozen=True)
class Passenger:
    title: PassengerTitle
    first_name: str
    last_name: str
    date_of_birth: date
    gender: Gender
    nationality: str
    passport_number: str = attrs.field(repr=False)
    seat_number: str
    seat_class: Optional[SeatClass] = None
    special_requests: Optional[str] = None
    meal_preference: MealPreference = MealPreference.NONE

    @property
    def full_name(self) -> str:
        return f'{self.title} {self.first_name} {self.last_name}'


@attrs.define(frozen=True)
class EmergencyContact:
    name: str
    phone: str
    relationship: Optional[str] = None


@attrs.define(frozen=True)
class ContactDetails:
    email: str
    phone: str = DEFAULT_CONTACT_PHONE
    emergency_contact: Optional[EmergencyContact] = None

    @classmethod
    def build(
        cls,
        *,
        email: str,
        phone: Optional[str] = None,
        emergency_contact: Optional[EmergencyContact] = None,
    ) -> 'ContactDetails':
        # Blank phone falls back to the placeholder number
        return cls(
            email=email.strip(),
            phone=phone.strip() if phone and phone.strip() else DEFAULT_CONTACT_PHONE,
            emergency_contact=emergency_contact,
        )


@attrs.define(frozen=True)
class SpecialService:
    type: SpecialServiceType
    price: Decimal = Decimal('0')
    description: Optional[str] = None
