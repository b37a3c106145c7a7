"""
In-process keyed lock registry

Serializes the read-check-mutate-write sequence on one flight (`flight:{id}`) or one
booking (`booking:{booking_id}`). Storage-level conditional updates still guard
against writers in other processes; this lock only removes in-process contention.
"""

import asyncio
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import AsyncIterator

from src.platform.logging.loguru_io import Logger


def flight_lock_key(flight_id: int) -> str:
    return f'flight:{flight_id}'


def booking_lock_key(booking_id: str) -> str:
    return f'booking:{booking_id}'


class FlightLockManager:
    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._holders: defaultdict[str, int] = defaultdict(int)

    @asynccontextmanager
    async def hold(self, *, key: str) -> AsyncIterator[None]:
        """
        Hold the lock for `key` for the duration of the block.

        Locks are created on demand and dropped once no coroutine holds or waits on
        them, so the registry does not grow with the number of flights ever touched.
        """
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._holders[key] += 1
        try:
            async with lock:
                Logger.base.debug(f'🔒 [LOCK] Acquired lock: {key}')
                yield
        finally:
            self._holders[key] -= 1
            if not self._holders[key]:
                del self._holders[key]
                self._locks.pop(key, None)
            Logger.base.debug(f'🔓 [LOCK] Released lock: {key}')

    def is_locked(self, *, key: str) -> bool:
        lock = self._locks.get(key)
        return bool(lock and lock.locked())
