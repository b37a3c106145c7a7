from datetime import timedelta
from decimal import Decimal

import attrs

from src.platform.config.core_setting import Settings


@attrs.define(frozen=True)
class BookingPolicy:
    """Time windows and refund rules applied by the booking lifecycle"""

    booking_cutoff_hours: float = 2
    check_in_window_hours: float = 24
    # 0 disables the cancellation cutoff: cancellations allowed until departure
    cancellation_cutoff_hours: float = 0
    refund_percentage: Decimal = Decimal('0.80')
    refund_delay_hours: float = 12
    reference_max_attempts: int = 5

    @property
    def refund_delay(self) -> timedelta:
        return timedelta(hours=self.refund_delay_hours)

    @classmethod
    def from_settings(cls, settings: Settings) -> 'BookingPolicy':
        return cls(
            booking_cutoff_hours=settings.BOOKING_CUTOFF_HOURS,
            check_in_window_hours=settings.CHECK_IN_WINDOW_HOURS,
            cancellation_cutoff_hours=settings.CANCELLATION_CUTOFF_HOURS,
            refund_percentage=settings.REFUND_PERCENTAGE,
            refund_delay_hours=settings.REFUND_DELAY_HOURS,
            reference_max_attempts=settings.REFERENCE_MAX_ATTEMPTS,
        )
