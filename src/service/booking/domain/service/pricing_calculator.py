"""
Booking price computation.

    base_price   = sum of class prices from the fare table (economy price when the
                   class has no fare of its own)
    taxes        = round_half_up(base_price * tax_rate)
    fees         = fixed booking fee
    total_amount = sum of the seats' own prices + special services + taxes + fees

Pure and deterministic: no clock, no randomness, no I/O.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, Optional, Sequence

from src.platform.exception.exceptions import ValidationError
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.entity.flight_entity import ClassFare, Seat
from src.service.booking.domain.enum.seat_class import SeatClass
from src.service.booking.domain.value_object.booking_pricing import BookingPricing
from src.service.booking.domain.value_object.passenger import SpecialService


def round_half_up(value: Decimal) -> Decimal:
    """Round to a whole currency unit, halves away from zero (245 * 0.8 -> 196)"""
    return value.quantize(Decimal('1'), rounding=ROUND_HALF_UP)


class PricingCalculator:
    def __init__(
        self,
        *,
        tax_rate: Decimal = Decimal('0.10'),
        booking_fee: Decimal = Decimal('25'),
        currency: str = 'USD',
    ) -> None:
        self.tax_rate = tax_rate
        self.booking_fee = booking_fee
        self.currency = currency

    @staticmethod
    def resolve_class_price(*, seat_class: SeatClass, fares: Dict[SeatClass, ClassFare]) -> Decimal:
        fare = fares.get(seat_class)
        if fare is not None and fare.price:
            return fare.price
        economy = fares.get(SeatClass.ECONOMY)
        if economy is None:
            raise ValidationError(f'Flight has no price for {seat_class} or economy class')
        return economy.price

    @staticmethod
    def _validate_non_negative(
        *, seats: Sequence[Seat], special_services: Iterable[SpecialService]
    ) -> None:
        for seat in seats:
            if seat.price is not None and seat.price < 0:
                raise ValidationError(f'Seat {seat.seat_number} has a negative price')
        for service in special_services:
            if service.price < 0:
                raise ValidationError(f'Special service {service.type} has a negative price')

    @Logger.io
    def compute_pricing(
        self,
        *,
        seats: Sequence[Seat],
        fares: Dict[SeatClass, ClassFare],
        special_services: Optional[Sequence[SpecialService]] = None,
    ) -> BookingPricing:
        """
        Args:
            seats: one seat per passenger, in passenger order
            fares: the flight's per-class fare table
            special_services: paid add-ons attached to the booking
        """
        special_services = special_services or []
        if not seats:
            raise ValidationError('At least one seat is required to compute pricing')
        self._validate_non_negative(seats=seats, special_services=special_services)

        base_price = Decimal('0')
        seats_total = Decimal('0')
        for seat in seats:
            class_price = self.resolve_class_price(seat_class=seat.seat_class, fares=fares)
            base_price += class_price
            # Premium positions carry their own price; fall back to the class price
            seats_total += seat.price if seat.price else class_price

        services_total = sum((service.price for service in special_services), Decimal('0'))
        taxes = round_half_up(base_price * self.tax_rate)
        fees = self.booking_fee

        return BookingPricing(
            base_price=base_price,
            taxes=taxes,
            fees=fees,
            total_amount=seats_total + services_total + taxes + fees,
            currency=self.currency,
        )
