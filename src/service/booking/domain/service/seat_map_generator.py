from decimal import Decimal
from typing import Dict, List

from src.platform.exception.exceptions import ValidationError
from src.service.booking.domain.entity.flight_entity import ClassFare, Seat
from src.service.booking.domain.enum.seat_class import SeatClass


# Seat letters per cabin layout ('I' is never used as a seat letter)
LAYOUT_COLUMNS: Dict[str, List[str]] = {
    '3-3': ['A', 'B', 'C', 'D', 'E', 'F'],
    '3-4-3': ['A', 'B', 'C', 'D', 'E', 'F', 'G', 'H', 'J', 'K'],
    '2-4-2': ['A', 'B', 'C', 'D', 'E', 'F', 'G', 'H'],
    '2-3-2': ['A', 'B', 'C', 'D', 'E', 'F', 'G'],
}

FIRST_CLASS_LAST_ROW = 3
BUSINESS_CLASS_LAST_ROW = 8
MIN_ROWS, MAX_ROWS = 10, 60


def seat_class_for_row(row: int) -> SeatClass:
    if row <= FIRST_CLASS_LAST_ROW:
        return SeatClass.FIRST
    if row <= BUSINESS_CLASS_LAST_ROW:
        return SeatClass.BUSINESS
    return SeatClass.ECONOMY


def default_class_prices(*, economy_price: Decimal) -> Dict[SeatClass, Decimal]:
    """Fare table used when only the economy price is supplied"""
    return {
        SeatClass.ECONOMY: economy_price,
        SeatClass.BUSINESS: economy_price * Decimal('2.5'),
        SeatClass.FIRST: economy_price * 4,
    }


def _seat_price(seat_class: SeatClass, prices: Dict[SeatClass, Decimal]) -> Decimal:
    economy = prices[SeatClass.ECONOMY]
    if seat_class == SeatClass.FIRST:
        return prices.get(SeatClass.FIRST) or economy * 3
    if seat_class == SeatClass.BUSINESS:
        return prices.get(SeatClass.BUSINESS) or economy * 2
    return economy


def generate_seat_map(*, layout: str, rows: int, prices: Dict[SeatClass, Decimal]) -> List[Seat]:
    """
    Build the seat list for a new flight.

    Rows 1-3 are first class, 4-8 business, the rest economy. First and last letters
    are window seats, the two middle letters of a 3-3 cabin are aisle seats, and the
    first-class rows get extra legroom.
    """
    if layout not in LAYOUT_COLUMNS:
        raise ValidationError(
            f'Unsupported seat layout {layout!r}, expected one of {", ".join(LAYOUT_COLUMNS)}'
        )
    if not MIN_ROWS <= rows <= MAX_ROWS:
        raise ValidationError(f'Seat map rows must be between {MIN_ROWS} and {MAX_ROWS}')
    if SeatClass.ECONOMY not in prices:
        raise ValidationError('Economy pricing is required')

    columns = LAYOUT_COLUMNS[layout]
    seats: List[Seat] = []
    for row in range(1, rows + 1):
        seat_class = seat_class_for_row(row)
        for index, column in enumerate(columns):
            features = []
            if index in (0, len(columns) - 1):
                features.append('window')
            if layout == '3-3' and index in (2, 3):
                features.append('aisle')
            if row <= FIRST_CLASS_LAST_ROW:
                features.append('extra-legroom')
            seats.append(
                Seat(
                    seat_number=f'{row}{column}',
                    seat_class=seat_class,
                    price=_seat_price(seat_class, prices),
                    row=row,
                    column=column,
                    features=features,
                )
            )
    return seats


def build_fares(*, seats: List[Seat], prices: Dict[SeatClass, Decimal]) -> Dict[SeatClass, ClassFare]:
    """Fare table whose counters are derived from the seat list, never supplied"""
    fares: Dict[SeatClass, ClassFare] = {}
    for seat_class in SeatClass:
        price = prices.get(seat_class)
        if price is None:
            continue
        fares[seat_class] = ClassFare(
            price=price,
            available_seats=sum(
                1 for seat in seats if seat.seat_class == seat_class and seat.is_bookable
            ),
        )
    return fares
