from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import InvalidTransitionError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_unit_of_work import AbstractUnitOfWork
from src.service.marketplace.app.policy.authorization import authorize
from src.service.marketplace.domain.entity.booking_entity import (
    Booking,
    BookingDecision,
    BookingStatus,
)
from src.service.marketplace.domain.entity.user_entity import UserRole
from src.service.marketplace.domain.value_object.identity import Identity


class DecideBookingUseCase:
    """Vendor accepts or rejects a pending booking. Inventory stays reserved either way."""

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
    async def execute(
        self, *, identity: Identity, booking_id: str, decision: BookingDecision
    ) -> Booking:
        authorize(identity, UserRole.VENDOR)

        async with self.uow:
            booking = await self.uow.booking_repo.get_by_id(booking_id=booking_id)
            if not booking:
                raise NotFoundError('Booking not found')

            authorize(identity, UserRole.VENDOR, resource_owner_email=booking.vendor_email)

            decided = booking.decide(BookingDecision(decision))
            updated = await self.uow.booking_repo.update_status_if(
                booking=decided, expected_statuses=[BookingStatus.PENDING]
            )
            if updated is None:
                # Another request moved the booking on after we read it
                raise InvalidTransitionError('Booking is no longer pending')

            await self.uow.commit()

        Logger.base.info(f'✅ [DECIDE] Booking {booking_id} -> {updated.status.value}')
        return updated
