from typing import List

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.marketplace.app.command.decide_booking_use_case import DecideBookingUseCase
from src.service.marketplace.app.command.settle_booking_payment_use_case import (
    SettleBookingPaymentUseCase,
)
from src.service.marketplace.app.query.list_bookings_use_case import ListBookingsUseCase
from src.service.marketplace.domain.value_object.identity import Identity
from src.service.marketplace.driving_adapter.http_controller.auth.role_auth import (
    get_current_identity,
)
from src.service.marketplace.driving_adapter.http_controller.schema.booking_schema import (
    BookingCreateRequest,
    BookingDecisionRequest,
    BookingResponse,
)


router = APIRouter()


@router.post('', response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_booking(
    request: BookingCreateRequest,
    identity: Identity = Depends(get_current_identity),
    use_case: CreateBookingUseCase = Depends(CreateBookingUseCase.depends),
) -> BookingResponse:
    booking = await use_case.execute(
        identity=identity, ticket_id=request.ticket_id, quantity=request.quantity
    )
    return BookingResponse.model_validate(booking)


@router.get('/user', response_model=List[BookingResponse])
@Logger.io
async def list_user_bookings(
    identity: Identity = Depends(get_current_identity),
    use_case: ListBookingsUseCase = Depends(ListBookingsUseCase.depends),
) -> List[BookingResponse]:
    bookings = await use_case.list_user_bookings(identity=identity)
    return [BookingResponse.model_validate(booking) for booking in bookings]


@router.get('/vendor', response_model=List[BookingResponse])
@Logger.io
async def list_vendor_bookings(
    identity: Identity = Depends(get_current_identity),
    use_case: ListBookingsUseCase = Depends(ListBookingsUseCase.depends),
) -> List[BookingResponse]:
    bookings = await use_case.list_vendor_bookings(identity=identity)
    return [BookingResponse.model_validate(booking) for booking in bookings]


@router.patch('/{booking_id}/decision', response_model=BookingResponse)
@Logger.io
async def decide_booking(
    booking_id: str,
    request: BookingDecisionRequest,
    identity: Identity = Depends(get_current_identity),
    use_case: DecideBookingUseCase = Depends(DecideBookingUseCase.depends),
) -> BookingResponse:
    booking = await use_case.execute(
        identity=identity, booking_id=booking_id, decision=request.decision
    )
    return BookingResponse.model_validate(booking)


@router.post('/{booking_id}/payment', response_model=BookingResponse)
@Logger.io
async def settle_booking_payment(
    booking_id: str,
    identity: Identity = Depends(get_current_identity),
    use_case: SettleBookingPaymentUseCase = Depends(SettleBookingPaymentUseCase.depends),
) -> BookingResponse:
    """Called once the payment provider confirmed the charge."""
    booking = await use_case.execute(identity=identity, booking_id=booking_id)
    return BookingResponse.model_validate(booking)
