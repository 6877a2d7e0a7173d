from datetime import datetime, timezone
from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import (
    DeparturePassedError,
    InvalidTransitionError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_unit_of_work import AbstractUnitOfWork
from src.service.marketplace.app.policy.authorization import authorize
from src.service.marketplace.domain.entity.booking_entity import (
    Booking,
    BookingStatus,
    sources_of,
)
from src.service.marketplace.domain.entity.user_entity import UserRole
from src.service.marketplace.domain.value_object.identity import Identity


class SettleBookingPaymentUseCase:
    """
    Record a successful payment for a booking.

    Payment is a pure status transition: the inventory was already reserved
    when the booking was created and is not touched again here.
    """

    def __init__(self, *, uow: AbstractUnitOfWork) -> None:
        self.uow = uow

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
    ) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(self, *, identity: Identity, booking_id: str) -> Booking:
        async with self.uow:
            booking = await self.uow.booking_repo.get_by_id(booking_id=booking_id)
            if not booking:
                raise NotFoundError('Booking not found')

            authorize(identity, UserRole.USER, resource_owner_email=booking.user_email)

            paid = booking.mark_as_paid()

            # Live departure wins; the snapshot covers tickets deleted since booking
            ticket = await self.uow.ticket_repo.get_by_id(ticket_id=booking.ticket_id)
            departure_at = ticket.departure_at if ticket else booking.departure_at
            if departure_at < datetime.now(timezone.utc):
                raise DeparturePassedError('Departure time has already passed')

            updated = await self.uow.booking_repo.update_status_if(
                booking=paid, expected_statuses=sources_of(BookingStatus.PAID)
            )
            if updated is None:
                raise InvalidTransitionError('Booking can no longer be paid')

            await self.uow.commit()

        Logger.base.info(f'💳 [PAY] Booking {booking_id} paid ({updated.total_price})')
        return updated
