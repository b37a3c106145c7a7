import asyncio

import pytest

from src.platform.state.flight_lock import FlightLockManager, booking_lock_key, flight_lock_key


@pytest.mark.unit
class TestFlightLockManager:
    def test_key_format(self):
        assert flight_lock_key(7) == 'flight:7'
        assert booking_lock_key('FBABC123') == 'booking:FBABC123'

    @pytest.mark.asyncio
    async def test_same_key_is_serialized(self):
        manager = FlightLockManager()
        order: list[str] = []

        async def critical(name: str) -> None:
            async with manager.hold(key=flight_lock_key(1)):
                order.append(f'{name}-in')
                await asyncio.sleep(0.01)
                order.append(f'{name}-out')

        await asyncio.gather(critical('a'), critical('b'))

        assert order in (
            ['a-in', 'a-out', 'b-in', 'b-out'],
            ['b-in', 'b-out', 'a-in', 'a-out'],
        )

    @pytest.mark.asyncio
    async def test_different_keys_do_not_block(self):
        manager = FlightLockManager()
        inside = asyncio.Event()

        async def holder() -> None:
            async with manager.hold(key=flight_lock_key(1)):
                inside.set()
                await asyncio.sleep(0.05)

        task = asyncio.create_task(holder())
        await inside.wait()
        async with manager.hold(key=flight_lock_key(2)):
            assert manager.is_locked(key=flight_lock_key(1))
        await task

    @pytest.mark.asyncio
    async def test_released_on_error_and_forgotten(self):
        manager = FlightLockManager()

        with pytest.raises(RuntimeError):
            async with manager.hold(key=booking_lock_key('FB1')):
                raise RuntimeError('boom')

        assert not manager.is_locked(key=booking_lock_key('FB1'))
        assert manager._locks == {}
