from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.platform.types.utc_datetime_types import ensure_utc
from src.service.booking.app.command.create_flight_use_case import CreateFlightUseCase
from src.service.booking.app.command.deactivate_flight_use_case import DeactivateFlightUseCase
from src.service.booking.app.query.get_flight_use_case import GetFlightUseCase
from src.service.booking.app.query.get_seat_map_use_case import GetSeatMapUseCase
from src.service.booking.app.query.search_flights_use_case import SearchFlightsUseCase
from src.service.booking.domain.entity.user_entity import UserEntity
from src.service.booking.domain.enum.seat_class import SeatClass
from src.service.booking.domain.value_object.flight_route import (
    Airline,
    Route,
    RouteEndpoint,
)
from src.service.booking.driving_adapter.http_controller.auth.role_auth import require_admin
from src.service.booking.driving_adapter.http_controller.schema.common_schema import (
    PaginationResponse,
)
from src.service.booking.driving_adapter.http_controller.schema.flight_schema import (
    FlightCreateRequest,
    FlightResponse,
    FlightSearchResponse,
    RouteEndpointSchema,
    SeatMapResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


def _to_endpoint(schema: RouteEndpointSchema) -> RouteEndpoint:
    return RouteEndpoint(
        airport_code=schema.airport_code,
        airport_name=schema.airport_name,
        city=schema.city,
        country=schema.country,
        time=ensure_utc(schema.time),
        terminal=schema.terminal,
        gate=schema.gate,
    )


@router.get('/search')
@Logger.io
async def search_flights(
    origin: Optional[str] = Query(None, alias='from'),
    destination: Optional[str] = Query(None, alias='to'),
    departure_date: Optional[date] = None,
    passengers: int = Query(1, ge=1, le=9),
    seat_class: SeatClass = Query(SeatClass.ECONOMY, alias='class'),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    use_case: SearchFlightsUseCase = Depends(SearchFlightsUseCase.depends),
) -> FlightSearchResponse:
    flights, total = await use_case.execute(
        origin=origin,
        destination=destination,
        departure_date=departure_date,
        passengers=passengers,
        seat_class=seat_class,
        page=page,
        limit=limit,
    )
    return FlightSearchResponse(
        flights=[FlightResponse.from_entity(flight) for flight in flights],
        pagination=PaginationResponse.build(page=page, limit=limit, total=total),
    )


@router.get('/{flight_id}')
@Logger.io
async def get_flight(
    flight_id: int,
    use_case: GetFlightUseCase = Depends(GetFlightUseCase.depends),
) -> FlightResponse:
    flight = await use_case.execute(flight_id=flight_id)
    return FlightResponse.from_entity(flight)


@router.get('/{flight_id}/seats')
@Logger.io
async def get_seat_map(
    flight_id: int,
    use_case: GetSeatMapUseCase = Depends(GetSeatMapUseCase.depends),
) -> SeatMapResponse:
    seat_map = await use_case.execute(flight_id=flight_id)
    return SeatMapResponse.from_seat_map(seat_map)


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_flight(
    request: FlightCreateRequest,
    current_user: UserEntity = Depends(require_admin),
    use_case: CreateFlightUseCase = Depends(CreateFlightUseCase.depends),
) -> FlightResponse:
    with tracer.start_as_current_span('controller.create_flight') as span:
        span.set_attribute('flight.number', request.flight_number)
        span.set_attribute('user.id', current_user.id)

        flight = await use_case.execute(
            flight_number=request.flight_number,
            airline=Airline(name=request.airline.name, code=request.airline.code.upper()),
            route=Route(
                departure=_to_endpoint(request.route.departure),
                arrival=_to_endpoint(request.route.arrival),
            ),
            aircraft_model=request.aircraft_model,
            economy_price=request.economy_price,
            business_price=request.business_price,
            first_price=request.first_price,
            seat_layout=request.seat_layout,
            rows=request.rows,
            status=request.status,
        )
        return FlightResponse.from_entity(flight)


@router.delete('/{flight_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def deactivate_flight(
    flight_id: int,
    current_user: UserEntity = Depends(require_admin),
    use_case: DeactivateFlightUseCase = Depends(DeactivateFlightUseCase.depends),
) -> FlightResponse:
    flight = await use_case.execute(flight_id=flight_id)
    return FlightResponse.from_entity(flight)
