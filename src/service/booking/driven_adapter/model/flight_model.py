from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.platform.database.orm_db_setting import Base
from src.platform.types.utc_datetime_types import UTCDateTime


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class FlightModel(Base):
    __tablename__ = 'flight'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    flight_number: Mapped[str] = mapped_column(String(10), unique=True, nullable=False)
    airline_name: Mapped[str] = mapped_column(String(100), nullable=False)
    airline_code: Mapped[str] = mapped_column(String(3), nullable=False)
    aircraft_model: Mapped[str] = mapped_column(String(50), nullable=False)
    aircraft_total_seats: Mapped[int] = mapped_column(Integer, nullable=False)
    seat_layout: Mapped[str] = mapped_column(String(10), nullable=False, default='3-3')

    # Route, flattened so search can filter on it
    departure_airport_code: Mapped[str] = mapped_column(String(3), nullable=False, index=True)
    departure_airport_name: Mapped[str] = mapped_column(String(255), nullable=False)
    departure_city: Mapped[str] = mapped_column(String(100), nullable=False)
    departure_country: Mapped[str] = mapped_column(String(100), nullable=False)
    departure_time: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, index=True)
    departure_terminal: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    departure_gate: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    arrival_airport_code: Mapped[str] = mapped_column(String(3), nullable=False, index=True)
    arrival_airport_name: Mapped[str] = mapped_column(String(255), nullable=False)
    arrival_city: Mapped[str] = mapped_column(String(100), nullable=False)
    arrival_country: Mapped[str] = mapped_column(String(100), nullable=False)
    arrival_time: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    arrival_terminal: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    arrival_gate: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)

    status: Mapped[str] = mapped_column(String(20), default='scheduled', nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    total_bookings: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    revenue: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal('0'), nullable=False)
    # Bumped on every inventory write
    version: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=_utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=_utc_now, onupdate=_utc_now, nullable=False
    )

    seats: Mapped[List['SeatModel']] = relationship(
        'SeatModel', order_by='SeatModel.id', cascade='all, delete-orphan', lazy='selectin'
    )
    fares: Mapped[List['FlightFareModel']] = relationship(
        'FlightFareModel', cascade='all, delete-orphan', lazy='selectin'
    )


class FlightFareModel(Base):
    __tablename__ = 'flight_fare'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    flight_id: Mapped[int] = mapped_column(Integer, ForeignKey('flight.id'), nullable=False)
    seat_class: Mapped[str] = mapped_column(String(20), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    available_seats: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    __table_args__ = (UniqueConstraint('flight_id', 'seat_class', name='uq_flight_fare_class'),)


class SeatModel(Base):
    __tablename__ = 'seat'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    flight_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('flight.id'), nullable=False, index=True
    )
    seat_number: Mapped[str] = mapped_column(String(5), nullable=False)
    seat_class: Mapped[str] = mapped_column(String(20), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    is_available: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_blocked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    row: Mapped[int] = mapped_column(Integer, nullable=False)
    column: Mapped[str] = mapped_column(String(1), nullable=False)
    features: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    __table_args__ = (UniqueConstraint('flight_id', 'seat_number', name='uq_seat_flight_number'),)
