from abc import ABC, abstractmethod

from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.entity.flight_entity import Flight
from src.service.booking.domain.entity.user_entity import UserEntity
from src.service.booking.domain.enum.notification_event import NotificationEvent


class INotificationService(ABC):
    """Outbound booking notifications (confirmation / cancellation e-mails)"""

    @abstractmethod
    async def notify(
        self,
        *,
        event: NotificationEvent,
        booking: Booking,
        user: UserEntity,
        flight: Flight,
    ) -> None:
        """Raise on delivery failure; callers decide whether that matters"""
        pass
