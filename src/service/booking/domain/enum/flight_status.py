from enum import StrEnum


class FlightStatus(StrEnum):
    SCHEDULED = 'scheduled'
    BOARDING = 'boarding'
    DEPARTED = 'departed'
    ARRIVED = 'arrived'
    CANCELLED = 'cancelled'
    DELAYED = 'delayed'


# Only these statuses accept new bookings
BOOKABLE_FLIGHT_STATUSES = frozenset({FlightStatus.SCHEDULED, FlightStatus.BOARDING})
