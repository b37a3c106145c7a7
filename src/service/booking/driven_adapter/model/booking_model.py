import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base
from src.platform.types.utc_datetime_types import UTCDateTime
from src.service.booking.driven_adapter.model.flight_model import _utc_now


class BookingModel(Base):
    __tablename__ = 'booking'

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)  # UUID7
    booking_id: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    pnr: Mapped[str] = mapped_column(String(6), unique=True, nullable=False)
    confirmation_code: Mapped[Optional[str]] = mapped_column(
        String(8), unique=True, nullable=True
    )
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    flight_id: Mapped[int] = mapped_column(
        Integer, ForeignKey('flight.id'), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(String(20), default='confirmed', nullable=False)
    passengers: Mapped[list] = mapped_column(JSON, nullable=False)
    contact_details: Mapped[dict] = mapped_column(JSON, nullable=False)
    special_services: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    pricing: Mapped[dict] = mapped_column(JSON, nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    payment: Mapped[dict] = mapped_column(JSON, nullable=False)
    is_checked_in: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    check_in: Mapped[dict] = mapped_column(JSON, nullable=False)
    cancellation: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    email_sent: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, default=_utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, default=_utc_now, onupdate=_utc_now, nullable=False
    )
