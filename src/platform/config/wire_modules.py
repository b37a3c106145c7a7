"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.booking.app.command import (
    cancel_booking_use_case,
    check_in_use_case,
    create_booking_use_case,
    create_flight_use_case,
    deactivate_flight_use_case,
)
from src.service.booking.app.query import (
    get_booking_use_case,
    get_flight_use_case,
    get_seat_map_use_case,
    list_bookings_use_case,
    search_booking_by_pnr_use_case,
    search_flights_use_case,
)
from src.service.booking.driving_adapter.http_controller.auth import role_auth


WIRE_MODULES: list[ModuleType] = [
    create_booking_use_case,
    cancel_booking_use_case,
    check_in_use_case,
    create_flight_use_case,
    deactivate_flight_use_case,
    get_booking_use_case,
    list_bookings_use_case,
    search_booking_by_pnr_use_case,
    get_flight_use_case,
    get_seat_map_use_case,
    search_flights_use_case,
    role_auth,
]
