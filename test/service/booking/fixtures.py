"""
Builders for flights, passengers and bookings

Plain functions so both AsyncMock-based unit tests and database-backed integration
tests can share them.
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import List, Optional
from unittest.mock import AsyncMock

import attrs

from src.platform.database.unit_of_work import AbstractUnitOfWork, SqlAlchemyUnitOfWork
from src.service.booking.app.command.create_flight_use_case import CreateFlightUseCase
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.entity.flight_entity import Flight
from src.service.booking.domain.enum.passenger_enum import Gender, PassengerTitle
from src.service.booking.domain.service.pricing_calculator import PricingCalculator
from src.service.booking.domain.service.reference_generator import ReferenceGenerator
from src.service.booking.domain.service.seat_map_generator import (
    build_fares,
    default_class_prices,
    generate_seat_map,
)
from src.service.booking.domain.value_object.flight_route import (
    Aircraft,
    Airline,
    Route,
    RouteEndpoint,
)
from src.service.booking.domain.value_object.passenger import ContactDetails, Passenger
from test.constants import ECONOMY_PRICE, TEST_CUSTOMER_ID


NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)

# 12 rows: 1-3 first, 4-8 business, 9-12 economy
TEST_ROWS = 12
ECONOMY_SEAT = '10A'
ANOTHER_ECONOMY_SEAT = '10B'
BUSINESS_SEAT = '5A'


def fixed_clock(now: datetime = NOW):
    return lambda: now


def make_airline() -> Airline:
    return Airline(name='Flight Booking Air', code='FB')


def make_route(
    *,
    departure_time: datetime,
    duration: timedelta = timedelta(hours=6),
    origin: str = 'JFK',
    destination: str = 'LAX',
) -> Route:
    return Route(
        departure=RouteEndpoint(
            airport_code=origin,
            airport_name=f'{origin} International',
            city='New York' if origin == 'JFK' else origin.title(),
            country='USA',
            time=departure_time,
            terminal='4',
            gate='B22',
        ),
        arrival=RouteEndpoint(
            airport_code=destination,
            airport_name=f'{destination} International',
            city='Los Angeles' if destination == 'LAX' else destination.title(),
            country='USA',
            time=departure_time + duration,
        ),
    )


def make_flight(
    *,
    departure_time: Optional[datetime] = None,
    flight_id: Optional[int] = 1,
    flight_number: str = 'FB101',
    economy_price: Decimal = Decimal(ECONOMY_PRICE),
    rows: int = TEST_ROWS,
) -> Flight:
    prices = default_class_prices(economy_price=economy_price)
    seats = generate_seat_map(layout='3-3', rows=rows, prices=prices)
    return Flight(
        flight_number=flight_number,
        airline=make_airline(),
        aircraft=Aircraft(model='Boeing 737-800', total_seats=len(seats)),
        route=make_route(departure_time=departure_time or NOW + timedelta(days=3)),
        seats=seats,
        fares=build_fares(seats=seats, prices=prices),
        id=flight_id,
    )


def make_passenger(
    *,
    seat_number: str = ECONOMY_SEAT,
    first_name: str = 'Jane',
    last_name: str = 'Doe',
    passport_number: str = 'X1234567',
) -> Passenger:
    return Passenger(
        title=PassengerTitle.MS,
        first_name=first_name,
        last_name=last_name,
        date_of_birth=date(1990, 4, 12),
        gender=Gender.FEMALE,
        nationality='US',
        passport_number=passport_number,
        seat_number=seat_number,
    )


def make_contact(*, email: str = 'jane@example.com') -> ContactDetails:
    return ContactDetails.build(email=email, phone='555-0100')


def make_booking(
    *,
    flight: Flight,
    seat_numbers: Optional[List[str]] = None,
    user_id: int = TEST_CUSTOMER_ID,
    now: datetime = NOW,
) -> Booking:
    """Confirmed, paid booking priced like the booking flow prices it"""
    references = ReferenceGenerator(clock=fixed_clock(now))
    seats = [flight.find_seat(seat_number) for seat_number in seat_numbers or [ECONOMY_SEAT]]
    assert all(seats), f'Unknown seat in {seat_numbers}'
    passengers = [
        attrs.evolve(make_passenger(seat_number=seat.seat_number), seat_class=seat.seat_class)
        for seat in seats
    ]
    pricing = PricingCalculator().compute_pricing(seats=seats, fares=flight.fares)
    assert flight.id is not None
    return (
        Booking.create(
            user_id=user_id,
            flight_id=flight.id,
            passengers=passengers,
            contact_details=make_contact(),
            pricing=pricing,
            references=references,
            now=now,
        )
        .complete_mock_payment(references=references, now=now)
        .ensure_confirmation_code(references=references)
    )


class FakeUnitOfWork(AbstractUnitOfWork):
    """Unit of work over AsyncMock repositories; counts commits and rollbacks"""

    def __init__(self, *, flight_command_repo: AsyncMock, booking_command_repo: AsyncMock) -> None:
        self.flight_command_repo = flight_command_repo
        self.booking_command_repo = booking_command_repo
        self.commits = 0
        self.rollbacks = 0

    async def _commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1


async def create_flight(
    *,
    departure_in: timedelta = timedelta(days=3),
    flight_number: str = 'FB101',
    origin: str = 'JFK',
    destination: str = 'LAX',
    economy_price: Decimal = Decimal(ECONOMY_PRICE),
    departure_time: Optional[datetime] = None,
) -> Flight:
    """Store a flight through the admin use case; departs relative to the real clock"""
    return await CreateFlightUseCase(uow_factory=SqlAlchemyUnitOfWork).execute(
        flight_number=flight_number,
        airline=make_airline(),
        route=make_route(
            departure_time=departure_time or datetime.now(timezone.utc) + departure_in,
            origin=origin,
            destination=destination,
        ),
        aircraft_model='Boeing 737-800',
        economy_price=economy_price,
        rows=TEST_ROWS,
    )
