"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.booking.driven_adapter.model.booking_model import BookingModel
from src.service.booking.driven_adapter.model.flight_model import (
    FlightFareModel,
    FlightModel,
    SeatModel,
)

__all__ = [
    'BookingModel',
    'FlightFareModel',
    'FlightModel',
    'SeatModel',
]
