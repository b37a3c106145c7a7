from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.booking.app.command.cancel_booking_use_case import CancelBookingUseCase
from src.service.booking.app.command.check_in_use_case import CheckInUseCase
from src.service.booking.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.booking.app.query.get_booking_use_case import GetBookingUseCase
from src.service.booking.app.query.list_bookings_use_case import ListBookingsUseCase
from src.service.booking.app.query.search_booking_by_pnr_use_case import (
    SearchBookingByPnrUseCase,
)
from src.service.booking.domain.entity.user_entity import UserEntity
from src.service.booking.domain.enum.booking_status import BookingStatus
from src.service.booking.driving_adapter.http_controller.auth.role_auth import (
    get_current_user,
    require_customer_or_admin,
)
from src.service.booking.driving_adapter.http_controller.schema.booking_schema import (
    BoardingPassResponse,
    BookingCreateRequest,
    BookingListResponse,
    BookingResponse,
    CancelBookingRequest,
    CancelBookingResponse,
    PnrLookupResponse,
)
from src.service.booking.driving_adapter.http_controller.schema.common_schema import (
    PaginationResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_booking(
    request: BookingCreateRequest,
    current_user: UserEntity = Depends(require_customer_or_admin),
    use_case: CreateBookingUseCase = Depends(CreateBookingUseCase.depends),
) -> BookingResponse:
    with tracer.start_as_current_span('controller.create_booking') as span:
        span.set_attribute('flight.id', request.flight_id)
        span.set_attribute('user.id', current_user.id)
        span.set_attribute('booking.passengers', len(request.passengers))

        view = await use_case.execute(
            user=current_user,
            flight_id=request.flight_id,
            passengers=[passenger.to_value_object() for passenger in request.passengers],
            contact_details=request.contact_details.to_value_object()
            if request.contact_details
            else None,
            selected_seats=[seat.strip().upper() for seat in request.selected_seats]
            if request.selected_seats
            else None,
            special_services=[service.to_value_object() for service in request.special_services],
        )

        span.set_attribute('booking.id', view.booking.booking_id)
        return BookingResponse.from_view(view, now=datetime.now(timezone.utc))


@router.get('/my_booking')
@Logger.io
async def list_my_bookings(
    booking_status: Optional[BookingStatus] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    current_user: UserEntity = Depends(get_current_user),
    use_case: ListBookingsUseCase = Depends(ListBookingsUseCase.depends),
) -> BookingListResponse:
    views, total = await use_case.execute(
        user_id=current_user.id, status=booking_status, page=page, limit=limit
    )
    now = datetime.now(timezone.utc)
    return BookingListResponse(
        bookings=[BookingResponse.from_view(view, now=now) for view in views],
        pagination=PaginationResponse.build(page=page, limit=limit, total=total),
    )


@router.get('/pnr/{pnr}')
@Logger.io
async def get_booking_by_pnr(
    pnr: str,
    use_case: SearchBookingByPnrUseCase = Depends(SearchBookingByPnrUseCase.depends),
) -> PnrLookupResponse:
    view = await use_case.execute(pnr=pnr)
    return PnrLookupResponse.from_view(view)


@router.get('/{booking_id}')
@Logger.io
async def get_booking(
    booking_id: str,
    current_user: UserEntity = Depends(get_current_user),
    use_case: GetBookingUseCase = Depends(GetBookingUseCase.depends),
) -> BookingResponse:
    view = await use_case.execute(booking_id=booking_id, user=current_user)
    return BookingResponse.from_view(view, now=datetime.now(timezone.utc))


@router.patch('/{booking_id}/cancel', status_code=status.HTTP_200_OK)
@Logger.io
async def cancel_booking(
    booking_id: str,
    request: Optional[CancelBookingRequest] = None,
    current_user: UserEntity = Depends(get_current_user),
    use_case: CancelBookingUseCase = Depends(CancelBookingUseCase.depends),
) -> CancelBookingResponse:
    with tracer.start_as_current_span('controller.cancel_booking') as span:
        span.set_attribute('booking.id', booking_id)
        span.set_attribute('user.id', current_user.id)

        booking = await use_case.execute(
            booking_id=booking_id,
            user=current_user,
            reason=request.reason if request else None,
        )
        return CancelBookingResponse.from_entity(booking)


@router.patch('/{booking_id}/check-in', status_code=status.HTTP_200_OK)
@Logger.io
async def check_in(
    booking_id: str,
    current_user: UserEntity = Depends(get_current_user),
    use_case: CheckInUseCase = Depends(CheckInUseCase.depends),
) -> BoardingPassResponse:
    boarding_pass = await use_case.execute(booking_id=booking_id, user=current_user)
    return BoardingPassResponse.from_dto(boarding_pass)
