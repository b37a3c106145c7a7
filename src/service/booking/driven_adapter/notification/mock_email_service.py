"""Mock e-mail delivery: records messages instead of sending them."""

from collections import deque
from datetime import datetime, timezone
from typing import Deque, List, Optional

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_notification_service import INotificationService
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.entity.flight_entity import Flight
from src.service.booking.domain.entity.user_entity import UserEntity
from src.service.booking.domain.enum.notification_event import NotificationEvent


OUTBOX_SIZE = 1000


class MockEmailService(INotificationService):
    def __init__(self, *, debug: bool = False, outbox_size: int = OUTBOX_SIZE) -> None:
        self.debug = debug
        # Most recent messages only; inspected by tests
        self.sent_emails: Deque[dict] = deque(maxlen=outbox_size)

    @Logger.io
    async def send_email(
        self, *, to: str, subject: str, body: str, cc: Optional[List[str]] = None
    ) -> bool:
        email_data = {
            'to': to,
            'subject': subject,
            'body': body,
            'cc': cc or [],
            'sent_at': datetime.now(timezone.utc),
        }
        self.sent_emails.append(email_data)

        if self.debug:
            Logger.base.info(f'📧 [MOCK-EMAIL] To: {to} | {subject}\n{body}')
        return True

    async def notify(
        self,
        *,
        event: NotificationEvent,
        booking: Booking,
        user: UserEntity,
        flight: Flight,
    ) -> None:
        if event == NotificationEvent.CONFIRMATION:
            subject, body = self._confirmation(booking=booking, user=user, flight=flight)
        else:
            subject, body = self._cancellation(booking=booking, user=user, flight=flight)
        await self.send_email(to=booking.contact_details.email, subject=subject, body=body)

    @staticmethod
    def _itinerary(*, flight: Flight) -> str:
        departure, arrival = flight.route.departure, flight.route.arrival
        return (
            f'Flight: {flight.flight_number} ({flight.airline.name})\n'
            f'From: {departure.city} ({departure.airport_code}) '
            f'{departure.time:%Y-%m-%d %H:%M} UTC\n'
            f'To: {arrival.city} ({arrival.airport_code}) {arrival.time:%Y-%m-%d %H:%M} UTC'
        )

    def _confirmation(
        self, *, booking: Booking, user: UserEntity, flight: Flight
    ) -> tuple[str, str]:
        passengers = '\n'.join(
            f'  {passenger.full_name} - seat {passenger.seat_number} ({passenger.seat_class})'
            for passenger in booking.passengers
        )
        subject = f'Booking Confirmation - {booking.booking_id}'
        body = (
            f'Dear {user.name or "Customer"},\n\n'
            f'Your booking is confirmed.\n\n'
            f'Booking ID: {booking.booking_id}\n'
            f'PNR: {booking.pnr}\n'
            f'Confirmation code: {booking.confirmation_code}\n'
            f'{self._itinerary(flight=flight)}\n\n'
            f'Passengers:\n{passengers}\n\n'
            f'Total paid: {booking.pricing.total_amount} {booking.pricing.currency}'
        )
        return subject, body

    def _cancellation(
        self, *, booking: Booking, user: UserEntity, flight: Flight
    ) -> tuple[str, str]:
        cancellation = booking.cancellation
        subject = f'Booking Cancelled - {booking.booking_id}'
        body = (
            f'Dear {user.name or "Customer"},\n\n'
            f'Your booking {booking.booking_id} (PNR {booking.pnr}) has been cancelled.\n\n'
            f'{self._itinerary(flight=flight)}\n'
        )
        if cancellation is not None:
            body += (
                f'\nReason: {cancellation.reason}\n'
                f'Refund: {cancellation.refund_amount} {booking.pricing.currency} '
                f'({cancellation.refund_status})'
            )
            if cancellation.estimated_refund_at:
                body += f', expected by {cancellation.estimated_refund_at:%Y-%m-%d %H:%M} UTC'
        return subject, body
