from decimal import Decimal

import pytest

from src.platform.exception.exceptions import ValidationError
from src.service.booking.domain.entity.flight_entity import ClassFare, Seat
from src.service.booking.domain.enum.passenger_enum import SpecialServiceType
from src.service.booking.domain.enum.seat_class import SeatClass
from src.service.booking.domain.service.pricing_calculator import (
    PricingCalculator,
    round_half_up,
)
from src.service.booking.domain.value_object.passenger import SpecialService


FARES = {
    SeatClass.ECONOMY: ClassFare(price=Decimal('200'), available_seats=10),
    SeatClass.BUSINESS: ClassFare(price=Decimal('500'), available_seats=5),
}


def _seat(seat_number: str = '10A', seat_class: SeatClass = SeatClass.ECONOMY, price='200') -> Seat:
    return Seat(seat_number=seat_number, seat_class=seat_class, price=Decimal(price))


@pytest.mark.unit
class TestComputePricing:
    @pytest.fixture
    def calculator(self) -> PricingCalculator:
        return PricingCalculator(tax_rate=Decimal('0.10'), booking_fee=Decimal('25'))

    def test_single_economy_seat(self, calculator: PricingCalculator):
        pricing = calculator.compute_pricing(seats=[_seat()], fares=FARES)

        assert pricing.base_price == Decimal('200')
        assert pricing.taxes == Decimal('20')
        assert pricing.fees == Decimal('25')
        assert pricing.total_amount == Decimal('245')
        assert pricing.currency == 'USD'

    def test_fee_is_charged_once_per_booking(self, calculator: PricingCalculator):
        pricing = calculator.compute_pricing(
            seats=[_seat('10A'), _seat('10B', SeatClass.BUSINESS, '500')], fares=FARES
        )

        assert pricing.base_price == Decimal('700')
        assert pricing.taxes == Decimal('70')
        assert pricing.total_amount == Decimal('795')

    def test_premium_seat_price_is_charged_but_tax_uses_class_price(
        self, calculator: PricingCalculator
    ):
        pricing = calculator.compute_pricing(seats=[_seat(price='260')], fares=FARES)

        assert pricing.base_price == Decimal('200')
        assert pricing.taxes == Decimal('20')
        assert pricing.total_amount == Decimal('305')

    def test_seat_without_price_falls_back_to_class_price(self, calculator: PricingCalculator):
        pricing = calculator.compute_pricing(seats=[_seat(price='0')], fares=FARES)

        assert pricing.total_amount == Decimal('245')

    def test_class_without_fare_uses_economy_price(self, calculator: PricingCalculator):
        pricing = calculator.compute_pricing(
            seats=[_seat('1A', SeatClass.FIRST, '0')], fares=FARES
        )

        assert pricing.base_price == Decimal('200')
        assert pricing.total_amount == Decimal('245')

    def test_special_services_are_added_untaxed(self, calculator: PricingCalculator):
        pricing = calculator.compute_pricing(
            seats=[_seat()],
            fares=FARES,
            special_services=[
                SpecialService(type=SpecialServiceType.EXTRA_BAGGAGE, price=Decimal('50'))
            ],
        )

        assert pricing.taxes == Decimal('20')
        assert pricing.total_amount == Decimal('295')

    def test_taxes_round_half_up(self):
        calculator = PricingCalculator(tax_rate=Decimal('0.10'), booking_fee=Decimal('0'))

        pricing = calculator.compute_pricing(
            seats=[_seat(price='205')],
            fares={SeatClass.ECONOMY: ClassFare(price=Decimal('205'))},
        )

        assert pricing.taxes == Decimal('21')

    def test_negative_seat_price_rejected(self, calculator: PricingCalculator):
        with pytest.raises(ValidationError):
            calculator.compute_pricing(seats=[_seat(price='-1')], fares=FARES)

    def test_negative_service_price_rejected(self, calculator: PricingCalculator):
        with pytest.raises(ValidationError):
            calculator.compute_pricing(
                seats=[_seat()],
                fares=FARES,
                special_services=[
                    SpecialService(type=SpecialServiceType.WHEELCHAIR, price=Decimal('-5'))
                ],
            )

    def test_no_seats_rejected(self, calculator: PricingCalculator):
        with pytest.raises(ValidationError):
            calculator.compute_pricing(seats=[], fares=FARES)

    def test_missing_economy_fare_rejected(self, calculator: PricingCalculator):
        with pytest.raises(ValidationError):
            calculator.compute_pricing(
                seats=[_seat('1A', SeatClass.FIRST, '0')],
                fares={SeatClass.BUSINESS: ClassFare(price=Decimal('500'))},
            )


@pytest.mark.unit
class TestRoundHalfUp:
    @pytest.mark.parametrize(
        'value,expected',
        [
            (Decimal('196'), Decimal('196')),
            (Decimal('20.5'), Decimal('21')),
            (Decimal('20.49'), Decimal('20')),
            (Decimal('245') * Decimal('0.80'), Decimal('196')),
        ],
    )
    def test_rounds_to_whole_units(self, value: Decimal, expected: Decimal):
        assert round_half_up(value) == expected
