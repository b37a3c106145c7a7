"""
Fire-and-forget notification delivery.

Notifications run after the booking transaction commits and outside every lock.
Delivery failures are logged and dropped; they never reach the caller.
"""

import asyncio
from typing import Awaitable, Callable, Optional

from anyio.abc import TaskGroup

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.interface.i_notification_service import INotificationService
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.entity.flight_entity import Flight
from src.service.booking.domain.entity.user_entity import UserEntity
from src.service.booking.domain.enum.notification_event import NotificationEvent


OnSent = Callable[[], Awaitable[None]]


class NotificationDispatcher:
    def __init__(
        self,
        *,
        notification_service: INotificationService,
        task_group_provider: Optional[Callable[[], Optional[TaskGroup]]] = None,
    ) -> None:
        self.notification_service = notification_service
        # Resolved per dispatch: the lifespan task group only exists while the app runs
        self._task_group_provider = task_group_provider or (lambda: None)
        self._pending: set[asyncio.Task[None]] = set()

    def dispatch(
        self,
        *,
        event: NotificationEvent,
        booking: Booking,
        user: UserEntity,
        flight: Flight,
        on_sent: Optional[OnSent] = None,
    ) -> None:
        task_group = self._task_group_provider()
        if task_group is not None:
            task_group.start_soon(self._deliver, event, booking, user, flight, on_sent)
            return

        task = asyncio.create_task(self._deliver(event, booking, user, flight, on_sent))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _deliver(
        self,
        event: NotificationEvent,
        booking: Booking,
        user: UserEntity,
        flight: Flight,
        on_sent: Optional[OnSent],
    ) -> None:
        try:
            await self.notification_service.notify(
                event=event, booking=booking, user=user, flight=flight
            )
        except Exception as e:
            Logger.base.error(
                f'📧 [NOTIFY] {event} notification failed for booking {booking.booking_id}: {e}'
            )
            return

        Logger.base.info(f'📧 [NOTIFY] {event} sent for booking {booking.booking_id}')
        if on_sent is None:
            return
        try:
            await on_sent()
        except Exception as e:
            Logger.base.error(
                f'📧 [NOTIFY] Post-send update failed for booking {booking.booking_id}: {e}'
            )

    async def drain(self) -> None:
        """Wait for notifications started outside a task group"""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
