#!/usr/bin/env python3
"""
Database Seed Script
Populate demo flights and print JWTs for the demo accounts

Features:
1. Create tables if missing
2. Create a handful of scheduled flights (generated seat maps) departing over the next days
3. Print bearer tokens for one customer and one admin (tokens are not stored anywhere)
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import text

from src.platform.database.orm_db_setting import (
    create_db_and_tables,
    dispose_engine,
    get_session_maker,
)
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.platform.exception.exceptions import ConflictError
from src.service.booking.app.command.create_flight_use_case import CreateFlightUseCase
from src.service.booking.domain.entity.user_entity import UserEntity, UserRole
from src.service.booking.domain.value_object.flight_route import Airline, Route, RouteEndpoint
from src.service.booking.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


@dataclass
class FlightConfig:
    """Flight seed configuration"""

    flight_number: str
    origin: tuple[str, str, str]  # airport code, airport name, city
    destination: tuple[str, str, str]
    days_ahead: int
    duration_hours: int
    economy_price: Decimal
    seat_layout: str = '3-3'
    rows: int = 30


AIRLINE = Airline(name='Flight Booking Air', code='FB')

SEED_FLIGHTS = [
    FlightConfig(
        'FB101', ('JFK', 'John F. Kennedy International', 'New York'),
        ('LAX', 'Los Angeles International', 'Los Angeles'), 1, 6, Decimal('200'),
    ),
    FlightConfig(
        'FB102', ('LAX', 'Los Angeles International', 'Los Angeles'),
        ('JFK', 'John F. Kennedy International', 'New York'), 2, 5, Decimal('220'),
    ),
    FlightConfig(
        'FB201', ('SFO', 'San Francisco International', 'San Francisco'),
        ('ORD', "O'Hare International", 'Chicago'), 3, 4, Decimal('150'), '3-4-3', 40,
    ),
]

TEST_USERS = [
    UserEntity(id=1, email='customer@example.com', name='Demo Customer', role=UserRole.CUSTOMER),
    UserEntity(id=2, email='admin@example.com', name='Demo Admin', role=UserRole.ADMIN),
]


def _endpoint(airport: tuple[str, str, str], time: datetime) -> RouteEndpoint:
    code, name, city = airport
    return RouteEndpoint(airport_code=code, airport_name=name, city=city, country='USA', time=time)


async def create_flights() -> None:
    print('✈️  Creating flights...')
    use_case = CreateFlightUseCase(uow_factory=SqlAlchemyUnitOfWork)
    today = datetime.now(timezone.utc).replace(hour=9, minute=0, second=0, microsecond=0)

    for config in SEED_FLIGHTS:
        departure_time = today + timedelta(days=config.days_ahead)
        try:
            flight = await use_case.execute(
                flight_number=config.flight_number,
                airline=AIRLINE,
                route=Route(
                    departure=_endpoint(config.origin, departure_time),
                    arrival=_endpoint(
                        config.destination,
                        departure_time + timedelta(hours=config.duration_hours),
                    ),
                ),
                aircraft_model='Boeing 737-800' if config.seat_layout == '3-3' else 'Boeing 777',
                economy_price=config.economy_price,
                seat_layout=config.seat_layout,
                rows=config.rows,
            )
            print(f'   ✅ {flight.flight_number}: ID={flight.id}, seats={len(flight.seats)}')
        except ConflictError:
            print(f'   ⏭️  {config.flight_number} already exists')


async def verify_data() -> None:
    """Verify seeded data"""
    print('🔍 Verifying seeded data...')

    async with get_session_maker()() as session:
        for table in ['flight', 'seat', 'booking']:
            result = await session.execute(text(f'SELECT COUNT(*) FROM {table}'))
            print(f'   {table.capitalize()} count: {result.scalar()}')

    print('   ✅ Data verification completed!')


async def main() -> None:
    print('🌱 Starting data seeding...')
    print('=' * 50)

    try:
        await create_db_and_tables()
        await create_flights()
        await verify_data()

        print()
        print('=' * 50)
        print('🌱 Data seeding completed!')
        print('📋 Test tokens (Authorization: Bearer <token>):')
        jwt_auth = JwtAuth()
        for user in TEST_USERS:
            print(f'   {user.role.value}: {jwt_auth.create_jwt_token(user)}')

    except Exception as e:
        print(f'❌ Seeding failed: {e}')
        exit(1)

    finally:
        await dispose_engine()


if __name__ == '__main__':
    asyncio.run(main())
