"""Flight aggregate <-> flight / flight_fare / seat rows"""

from decimal import Decimal
from typing import List

from src.service.booking.domain.entity.flight_entity import (
    BookingStats,
    ClassFare,
    Flight,
    Seat,
)
from src.service.booking.domain.enum.flight_status import FlightStatus
from src.service.booking.domain.enum.seat_class import SeatClass
from src.service.booking.domain.value_object.flight_route import (
    Aircraft,
    Airline,
    Route,
    RouteEndpoint,
)
from src.service.booking.driven_adapter.model.flight_model import (
    FlightFareModel,
    FlightModel,
    SeatModel,
)


def to_flight_entity(db_flight: FlightModel) -> Flight:
    return Flight(
        id=db_flight.id,
        flight_number=db_flight.flight_number,
        airline=Airline(name=db_flight.airline_name, code=db_flight.airline_code),
        aircraft=Aircraft(
            model=db_flight.aircraft_model, total_seats=db_flight.aircraft_total_seats
        ),
        route=Route(
            departure=RouteEndpoint(
                airport_code=db_flight.departure_airport_code,
                airport_name=db_flight.departure_airport_name,
                city=db_flight.departure_city,
                country=db_flight.departure_country,
                time=db_flight.departure_time,
                terminal=db_flight.departure_terminal,
                gate=db_flight.departure_gate,
            ),
            arrival=RouteEndpoint(
                airport_code=db_flight.arrival_airport_code,
                airport_name=db_flight.arrival_airport_name,
                city=db_flight.arrival_city,
                country=db_flight.arrival_country,
                time=db_flight.arrival_time,
                terminal=db_flight.arrival_terminal,
                gate=db_flight.arrival_gate,
            ),
        ),
        seat_layout=db_flight.seat_layout,
        seats=[
            Seat(
                seat_number=db_seat.seat_number,
                seat_class=SeatClass(db_seat.seat_class),
                price=Decimal(db_seat.price),
                is_available=db_seat.is_available,
                is_blocked=db_seat.is_blocked,
                row=db_seat.row,
                column=db_seat.column,
                features=list(db_seat.features or []),
            )
            for db_seat in db_flight.seats
        ],
        fares={
            SeatClass(db_fare.seat_class): ClassFare(
                price=Decimal(db_fare.price), available_seats=db_fare.available_seats
            )
            for db_fare in db_flight.fares
        },
        booking_stats=BookingStats(
            total_bookings=db_flight.total_bookings, revenue=Decimal(db_flight.revenue)
        ),
        status=FlightStatus(db_flight.status),
        is_active=db_flight.is_active,
        version=db_flight.version,
        created_at=db_flight.created_at,
        updated_at=db_flight.updated_at,
    )


def to_flight_model(flight: Flight) -> FlightModel:
    departure, arrival = flight.route.departure, flight.route.arrival
    return FlightModel(
        flight_number=flight.flight_number,
        airline_name=flight.airline.name,
        airline_code=flight.airline.code,
        aircraft_model=flight.aircraft.model,
        aircraft_total_seats=flight.aircraft.total_seats,
        seat_layout=flight.seat_layout,
        departure_airport_code=departure.airport_code,
        departure_airport_name=departure.airport_name,
        departure_city=departure.city,
        departure_country=departure.country,
        departure_time=departure.time,
        departure_terminal=departure.terminal,
        departure_gate=departure.gate,
        arrival_airport_code=arrival.airport_code,
        arrival_airport_name=arrival.airport_name,
        arrival_city=arrival.city,
        arrival_country=arrival.country,
        arrival_time=arrival.time,
        arrival_terminal=arrival.terminal,
        arrival_gate=arrival.gate,
        status=flight.status.value,
        is_active=flight.is_active,
        total_bookings=flight.booking_stats.total_bookings,
        revenue=flight.booking_stats.revenue,
        version=flight.version,
        seats=_to_seat_models(flight.seats),
        fares=[
            FlightFareModel(
                seat_class=seat_class.value,
                price=fare.price,
                available_seats=fare.available_seats,
            )
            for seat_class, fare in flight.fares.items()
        ],
    )


def _to_seat_models(seats: List[Seat]) -> List[SeatModel]:
    return [
        SeatModel(
            seat_number=seat.seat_number,
            seat_class=seat.seat_class.value,
            price=seat.price,
            is_available=seat.is_available,
            is_blocked=seat.is_blocked,
            row=seat.row,
            column=seat.column,
            features=list(seat.features),
        )
        for seat in seats
    ]
