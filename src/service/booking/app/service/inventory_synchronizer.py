"""
Inventory Synchronizer

The single place where booking effects reach the flight: seat availability, class
counters and booking stats. Runs on the caller's unit of work; the caller commits.
"""

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ConflictError, ValidationError
from src.platform.logging.loguru_io import Logger
from src.service.booking.domain.entity.booking_entity import Booking
from src.service.booking.domain.entity.flight_entity import Flight


class InventorySynchronizer:
    @Logger.io
    async def claim_seats(
        self, *, uow: AbstractUnitOfWork, flight: Flight, seat_numbers: list[str]
    ) -> None:
        """
        All-or-nothing seat claim at storage level.

        Raises:
            ConflictError: naming every seat another booking got first; the caller's
                transaction rollback releases the seats that were claimed
        """
        flight_id = flight.stored_id
        claimed = await uow.flight_command_repo.claim_seats(
            flight_id=flight_id, seat_numbers=seat_numbers
        )
        lost = [seat_number for seat_number in seat_numbers if seat_number not in claimed]
        if lost:
            raise ConflictError(f'Seat {", ".join(lost)} is no longer available')

        for seat_number in seat_numbers:
            flight.mark_seat_unavailable(seat_number)

    @Logger.io
    async def record_booking(
        self, *, uow: AbstractUnitOfWork, flight: Flight, booking: Booking
    ) -> Flight:
        flight.record_booking(amount=booking.pricing.total_amount)
        flight.reconcile_available_seats()
        return await uow.flight_command_repo.save_inventory(flight=flight)

    @Logger.io
    async def release_booking(
        self, *, uow: AbstractUnitOfWork, flight: Flight, booking: Booking
    ) -> Flight:
        await uow.flight_command_repo.release_seats(
            flight_id=flight.stored_id, seat_numbers=booking.seat_numbers
        )
        for seat_number in booking.seat_numbers:
            try:
                flight.mark_seat_available(seat_number)
            except ValidationError as e:
                Logger.base.warning(f'⚠️ [INVENTORY] Skipping release of {seat_number}: {e}')

        flight.revert_booking(amount=booking.pricing.total_amount)
        flight.reconcile_available_seats()
        return await uow.flight_command_repo.save_inventory(flight=flight)
