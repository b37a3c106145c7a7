"""
Human-readable booking references.

    booking_id        FB + base-36 millisecond timestamp + 4 random chars
    pnr               6 chars [A-Z0-9]
    confirmation_code 8 chars [A-Z0-9]
    transaction_id    TXN + millisecond timestamp + 6 random chars

Generation is probabilistic; uniqueness is enforced by the booking table's unique
constraints and collisions are retried by the caller.
"""

from datetime import datetime, timezone
import secrets
import string
from typing import Callable


ALPHABET = string.ascii_uppercase + string.digits
_BASE36_DIGITS = string.digits + string.ascii_uppercase

PNR_LENGTH = 6
CONFIRMATION_CODE_LENGTH = 8


def _to_base36(value: int) -> str:
    if value == 0:
        return '0'
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return ''.join(reversed(digits))


class ReferenceGenerator:
    def __init__(self, *, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def _epoch_millis(self) -> int:
        return int(self._clock().timestamp() * 1000)

    @staticmethod
    def random_code(length: int) -> str:
        return ''.join(secrets.choice(ALPHABET) for _ in range(length))

    def booking_id(self) -> str:
        return f'FB{_to_base36(self._epoch_millis())}{self.random_code(4)}'

    def pnr(self) -> str:
        return self.random_code(PNR_LENGTH)

    def confirmation_code(self) -> str:
        return self.random_code(CONFIRMATION_CODE_LENGTH)

    def transaction_id(self) -> str:
        return f'TXN{self._epoch_millis()}{self.random_code(6)}'
