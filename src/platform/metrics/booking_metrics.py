from decimal import Decimal

from prometheus_client import Counter, Histogram

from src.platform.exception.exceptions import ConflictError, CustomBaseError


class BookingMetrics:
    """
    Booking Engine Metrics Collector

    Tracks the booking lifecycle (create, cancel, check-in) and seat inventory health.
    Served in Prometheus text format on `/metrics`.
    """

    def __init__(self):
        # ========== Booking Creation ==========
        self.booking_requests = Counter(
            'booking_requests_total',
            'Booking creation requests',
            ['result'],  # result: success/conflict/rejected/error
        )

        self.booking_create_duration = Histogram(
            'booking_create_duration_seconds',
            'Booking creation processing time',
            ['result'],
            buckets=[0.005, 0.01, 0.05, 0.1, 0.2, 0.5, 1.0, 2.0, 5.0],
        )

        self.seats_booked = Counter(
            'booking_seats_booked_total', 'Seats claimed by confirmed bookings', ['seat_class']
        )

        # ========== Cancellation / Refund ==========
        self.cancellations = Counter(
            'booking_cancellations_total', 'Booking cancellation requests', ['result']
        )

        self.refunds = Counter('booking_refunds_total', 'Refunds issued (pending payout)')

        self.refund_amount = Counter(
            'booking_refund_amount_total', 'Sum of refund amounts issued', ['currency']
        )

        self.inventory_reversal_failures = Counter(
            'booking_inventory_reversal_failures_total',
            'Cancellations whose seats could not be returned to the flight',
        )

        # ========== Check-in ==========
        self.check_ins = Counter('booking_check_ins_total', 'Check-in requests', ['result'])

    # ========== Helper Methods ==========

    def record_booking_request(
        self, *, result: str, duration: float, seat_classes: list[str] | None = None
    ):
        self.booking_requests.labels(result=result).inc()
        self.booking_create_duration.labels(result=result).observe(duration)
        for seat_class in seat_classes or []:
            self.seats_booked.labels(seat_class=seat_class).inc()

    def record_cancellation(
        self, *, result: str, refund_amount: Decimal | None = None, currency: str = 'USD'
    ):
        self.cancellations.labels(result=result).inc()
        if refund_amount is not None:
            self.refunds.inc()
            self.refund_amount.labels(currency=currency).inc(float(refund_amount))

    def record_inventory_reversal_failure(self):
        self.inventory_reversal_failures.inc()

    def record_check_in(self, *, result: str):
        self.check_ins.labels(result=result).inc()


def result_of(error: BaseException | None) -> str:
    """Metric label for how a request ended."""
    if error is None:
        return 'success'
    if isinstance(error, ConflictError):
        return 'conflict'
    if isinstance(error, CustomBaseError):
        return 'rejected'
    return 'error'


# Global metrics instance
metrics = BookingMetrics()
