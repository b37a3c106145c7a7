from enum import StrEnum


class NotificationEvent(StrEnum):
    CONFIRMATION = 'confirmation'
    CANCELLATION = 'cancellation'
