from decimal import Decimal
from typing import Callable, Dict, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ConflictError, ValidationError
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.entity.flight_entity import Flight
from src.service.booking.domain.enum.flight_status import FlightStatus
from src.service.booking.domain.enum.seat_class import SeatClass
from src.service.booking.domain.service.seat_map_generator import (
    build_fares,
    default_class_prices,
    generate_seat_map,
)
from src.service.booking.domain.value_object.flight_route import Aircraft, Airline, Route


class CreateFlightUseCase:
    """Admin: register a flight and generate its seat map"""

    def __init__(self, *, uow_factory: Callable[[], AbstractUnitOfWork]) -> None:
        self.uow_factory = uow_factory

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @staticmethod
    def _resolve_prices(
        *,
        economy_price: Decimal,
        business_price: Optional[Decimal],
        first_price: Optional[Decimal],
    ) -> Dict[SeatClass, Decimal]:
        if economy_price <= 0:
            raise ValidationError('Economy price must be positive')
        prices = default_class_prices(economy_price=economy_price)
        if business_price is not None:
            prices[SeatClass.BUSINESS] = business_price
        if first_price is not None:
            prices[SeatClass.FIRST] = first_price
        if any(price < 0 for price in prices.values()):
            raise ValidationError('Fare prices cannot be negative')
        return prices

    @Logger.io
    async def execute(
        self,
        *,
        flight_number: str,
        airline: Airline,
        route: Route,
        aircraft_model: str,
        economy_price: Decimal,
        business_price: Optional[Decimal] = None,
        first_price: Optional[Decimal] = None,
        seat_layout: str = '3-3',
        rows: int = 20,
        status: FlightStatus = FlightStatus.SCHEDULED,
    ) -> Flight:
        if route.arrival.time <= route.departure.time:
            raise ValidationError('Arrival must be after departure')
        if route.departure.airport_code == route.arrival.airport_code:
            raise ValidationError('Departure and arrival airports must differ')

        prices = self._resolve_prices(
            economy_price=economy_price, business_price=business_price, first_price=first_price
        )
        seats = generate_seat_map(layout=seat_layout, rows=rows, prices=prices)
        flight = Flight(
            flight_number=flight_number,
            airline=airline,
            aircraft=Aircraft(model=aircraft_model, total_seats=len(seats)),
            route=route,
            seat_layout=seat_layout,
            seats=seats,
            fares=build_fares(seats=seats, prices=prices),
            status=status,
        )

        async with self.uow_factory() as uow:
            if await uow.flight_command_repo.exists_by_flight_number(
                flight_number=flight.flight_number
            ):
                raise ConflictError(f'Flight number {flight.flight_number} already exists')
            flight = await uow.flight_command_repo.create(flight=flight)
            await uow.commit()

        Logger.base.info(
            f'🛫 [CREATE-FLIGHT] {flight.flight_number} (id={flight.id}) with {len(seats)} seats'
        )
        return flight
