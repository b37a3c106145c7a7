from enum import StrEnum


class BookingStatus(StrEnum):
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'
    PENDING = 'pending'
    COMPLETED = 'completed'
    NO_SHOW = 'no-show'


# Bookings that still hold their seats
ACTIVE_BOOKING_STATUSES = frozenset({BookingStatus.CONFIRMED, BookingStatus.PENDING})


class PaymentStatus(StrEnum):
    PENDING = 'pending'
    COMPLETED = 'completed'
    FAILED = 'failed'
    REFUNDED = 'refunded'


class RefundStatus(StrEnum):
    PENDING = 'pending'
    PROCESSED = 'processed'
    FAILED = 'failed'
    NOT_APPLICABLE = 'not_applicable'
