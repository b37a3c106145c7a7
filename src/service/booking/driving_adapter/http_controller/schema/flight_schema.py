from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from src.service.booking.app.dto.seat_map import SeatMap
from src.service.booking.domain.entity.flight_entity import Flight, Seat
from src.service.booking.domain.enum.flight_status import FlightStatus
from src.service.booking.domain.enum.seat_class import SeatClass
from src.service.booking.domain.value_object.flight_route import RouteEndpoint
from src.service.booking.driving_adapter.http_controller.schema.common_schema import (
    Money,
    PaginationResponse,
)


class AirlineSchema(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    code: str = Field(..., min_length=2, max_length=3)


class RouteEndpointSchema(BaseModel):
    airport_code: str = Field(..., min_length=3, max_length=3)
    airport_name: str
    city: str
    country: str
    time: datetime
    terminal: Optional[str] = None
    gate: Optional[str] = None

    @classmethod
    def from_entity(cls, endpoint: RouteEndpoint) -> 'RouteEndpointSchema':
        return cls(
            airport_code=endpoint.airport_code,
            airport_name=endpoint.airport_name,
            city=endpoint.city,
            country=endpoint.country,
            time=endpoint.time,
            terminal=endpoint.terminal,
            gate=endpoint.gate,
        )


class RouteSchema(BaseModel):
    departure: RouteEndpointSchema
    arrival: RouteEndpointSchema


class FlightCreateRequest(BaseModel):
    flight_number: str = Field(..., min_length=3, max_length=10)
    airline: AirlineSchema
    route: RouteSchema
    aircraft_model: str
    seat_layout: Literal['3-3', '3-4-3', '2-4-2', '2-3-2'] = '3-3'
    rows: int = 20
    economy_price: Money
    business_price: Optional[Money] = None
    first_price: Optional[Money] = None
    status: FlightStatus = FlightStatus.SCHEDULED

    model_config = {
        'json_schema_extra': {
            'example': {
                'flight_number': 'FB101',
                'airline': {'name': 'Flight Booking Air', 'code': 'FB'},
                'route': {
                    'departure': {
                        'airport_code': 'JFK',
                        'airport_name': 'John F. Kennedy International',
                        'city': 'New York',
                        'country': 'USA',
                        'time': '2026-12-01T10:00:00Z',
                        'terminal': '4',
                    },
                    'arrival': {
                        'airport_code': 'LAX',
                        'airport_name': 'Los Angeles International',
                        'city': 'Los Angeles',
                        'country': 'USA',
                        'time': '2026-12-01T16:00:00Z',
                    },
                },
                'aircraft_model': 'Boeing 737-800',
                'seat_layout': '3-3',
                'rows': 30,
                'economy_price': 200,
            }
        }
    }


class FareResponse(BaseModel):
    price: Money
    available_seats: int


class FlightResponse(BaseModel):
    id: int
    flight_number: str
    airline: AirlineSchema
    aircraft_model: str
    total_seats: int
    route: RouteSchema
    duration_minutes: int
    seat_layout: str
    status: FlightStatus
    is_active: bool
    fares: Dict[SeatClass, FareResponse]
    total_available_seats: int

    @classmethod
    def from_entity(cls, flight: Flight) -> 'FlightResponse':
        return cls(
            id=flight.stored_id,
            flight_number=flight.flight_number,
            airline=AirlineSchema(name=flight.airline.name, code=flight.airline.code),
            aircraft_model=flight.aircraft.model,
            total_seats=flight.aircraft.total_seats,
            route=RouteSchema(
                departure=RouteEndpointSchema.from_entity(flight.route.departure),
                arrival=RouteEndpointSchema.from_entity(flight.route.arrival),
            ),
            duration_minutes=int(flight.duration.total_seconds() // 60),
            seat_layout=flight.seat_layout,
            status=flight.status,
            is_active=flight.is_active,
            fares={
                seat_class: FareResponse(price=fare.price, available_seats=fare.available_seats)
                for seat_class, fare in flight.fares.items()
            },
            total_available_seats=flight.total_available_seats,
        )


class FlightSearchResponse(BaseModel):
    flights: List[FlightResponse]
    pagination: PaginationResponse


class SeatResponse(BaseModel):
    seat_number: str
    seat_class: SeatClass
    price: Money
    is_available: bool
    row: int
    column: str
    features: List[str]

    @classmethod
    def from_entity(cls, seat: Seat) -> 'SeatResponse':
        return cls(
            seat_number=seat.seat_number,
            seat_class=seat.seat_class,
            price=seat.price,
            # Blocked seats are shown as taken
            is_available=seat.is_bookable,
            row=seat.row,
            column=seat.column,
            features=list(seat.features),
        )


class SeatMapResponse(BaseModel):
    flight_id: int
    flight_number: str
    seat_layout: str
    seats: Dict[SeatClass, List[SeatResponse]]
    fares: Dict[SeatClass, FareResponse]
    total_available_seats: int

    @classmethod
    def from_seat_map(cls, seat_map: SeatMap) -> 'SeatMapResponse':
        return cls(
            flight_id=seat_map.flight_id,
            flight_number=seat_map.flight_number,
            seat_layout=seat_map.seat_layout,
            seats={
                seat_class: [SeatResponse.from_entity(seat) for seat in seats]
                for seat_class, seats in seat_map.seats_by_class.items()
            },
            fares={
                seat_class: FareResponse(price=fare.price, available_seats=fare.available_seats)
                for seat_class, fare in seat_map.fares.items()
            },
            total_available_seats=seat_map.total_available_seats,
        )
