from collections import Counter
from decimal import Decimal

import pytest

from src.platform.exception.exceptions import ValidationError
from src.service.booking.domain.enum.seat_class import SeatClass
from src.service.booking.domain.service.seat_map_generator import (
    LAYOUT_COLUMNS,
    build_fares,
    default_class_prices,
    generate_seat_map,
    seat_class_for_row,
)


PRICES = default_class_prices(economy_price=Decimal('200'))


def _by_number(seats):
    return {seat.seat_number: seat for seat in seats}


@pytest.mark.unit
class TestGenerateSeatMap:
    def test_three_three_cabin(self):
        seats = generate_seat_map(layout='3-3', rows=20, prices=PRICES)

        assert len(seats) == 120
        assert len({seat.seat_number for seat in seats}) == 120
        assert Counter(seat.seat_class for seat in seats) == {
            SeatClass.FIRST: 18,
            SeatClass.BUSINESS: 30,
            SeatClass.ECONOMY: 72,
        }
        assert all(seat.is_bookable for seat in seats)

    def test_seat_features(self):
        seats = _by_number(generate_seat_map(layout='3-3', rows=10, prices=PRICES))

        assert seats['1A'].features == ['window', 'extra-legroom']
        assert seats['1C'].features == ['aisle', 'extra-legroom']
        assert seats['10F'].features == ['window']
        assert seats['10D'].features == ['aisle']
        assert seats['10B'].features == []

    def test_seat_prices_follow_class(self):
        seats = _by_number(generate_seat_map(layout='3-3', rows=10, prices=PRICES))

        assert seats['1A'].price == Decimal('800')
        assert seats['5A'].price == Decimal('500')
        assert seats['9A'].price == Decimal('200')

    def test_missing_class_prices_fall_back_to_economy_multiples(self):
        seats = _by_number(
            generate_seat_map(layout='3-3', rows=10, prices={SeatClass.ECONOMY: Decimal('100')})
        )

        assert seats['1A'].price == Decimal('300')
        assert seats['5A'].price == Decimal('200')

    def test_wide_layout_skips_letter_i(self):
        seats = generate_seat_map(layout='3-4-3', rows=10, prices=PRICES)

        assert not any(seat.column == 'I' for seat in seats)
        assert {seat.column for seat in seats} == set(LAYOUT_COLUMNS['3-4-3'])

    def test_rows_are_numbered_from_one(self):
        seats = generate_seat_map(layout='2-3-2', rows=10, prices=PRICES)

        assert min(seat.row for seat in seats) == 1
        assert max(seat.row for seat in seats) == 10

    def test_unknown_layout_rejected(self):
        with pytest.raises(ValidationError, match='Unsupported seat layout'):
            generate_seat_map(layout='1-1', rows=10, prices=PRICES)

    @pytest.mark.parametrize('rows', [9, 61])
    def test_row_bounds(self, rows: int):
        with pytest.raises(ValidationError):
            generate_seat_map(layout='3-3', rows=rows, prices=PRICES)

    def test_economy_price_required(self):
        with pytest.raises(ValidationError, match='Economy pricing'):
            generate_seat_map(
                layout='3-3', rows=10, prices={SeatClass.BUSINESS: Decimal('500')}
            )


@pytest.mark.unit
class TestBuildFares:
    def test_counters_are_derived_from_seats(self):
        seats = generate_seat_map(layout='3-3', rows=20, prices=PRICES)
        seats[-1].is_available = False
        seats[-2].is_blocked = True

        fares = build_fares(seats=seats, prices=PRICES)

        assert fares[SeatClass.ECONOMY].available_seats == 70
        assert fares[SeatClass.BUSINESS].available_seats == 30
        assert fares[SeatClass.FIRST].available_seats == 18
        assert fares[SeatClass.ECONOMY].price == Decimal('200')

    def test_classes_without_price_are_left_out(self):
        prices = {SeatClass.ECONOMY: Decimal('200')}
        seats = generate_seat_map(layout='3-3', rows=10, prices=prices)

        assert set(build_fares(seats=seats, prices=prices)) == {SeatClass.ECONOMY}


@pytest.mark.unit
def test_default_class_prices():
    assert default_class_prices(economy_price=Decimal('200')) == {
        SeatClass.ECONOMY: Decimal('200'),
        SeatClass.BUSINESS: Decimal('500'),
        SeatClass.FIRST: Decimal('800'),
    }


@pytest.mark.unit
@pytest.mark.parametrize(
    'row,expected',
    [(1, SeatClass.FIRST), (3, SeatClass.FIRST), (4, SeatClass.BUSINESS), (9, SeatClass.ECONOMY)],
)
def test_seat_class_for_row(row: int, expected: SeatClass):
    assert seat_class_for_row(row) == expected
