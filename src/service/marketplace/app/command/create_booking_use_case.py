from typing import Self

import anyio
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import (
    ConflictError,
    InsufficientInventoryError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_unit_of_work import AbstractUnitOfWork
from src.service.marketplace.app.policy.authorization import authorize
from src.service.marketplace.domain.entity.booking_entity import (
    Booking,
    validate_requested_quantity,
)
from src.service.marketplace.domain.entity.user_entity import UserRole
from src.service.marketplace.domain.value_object.identity import Identity


RETRY_BACKOFF_SECONDS = 0.05


class CreateBookingUseCase:
    """
    Reserve inventory and record a pending booking as one transaction.

    Flow:
    1. Conditional decrement of a listable ticket (fails instead of going negative)
    2. Snapshot the reserved ticket into a new booking, price computed server side
    3. Insert booking and commit both writes together

    A lost lock race on step 1 rolls the attempt back and retries it; any other
    failure rolls back and propagates, so the decrement never outlives the booking.
    """

    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        max_attempts: int = settings.BOOKING_RESERVATION_MAX_ATTEMPTS,
    ) -> None:
        self.uow = uow
        self.max_attempts = max(1, max_attempts)

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
    ) -> Self:
        return cls(uow=uow)

    @Logger.io
    async def execute(self, *, identity: Identity, ticket_id: str, quantity: int) -> Booking:
        """
        Raises:
            ForbiddenError: caller is not a USER
            ValidationError: quantity is not a positive integer
            NotFoundError: ticket does not exist or is not publicly listable
            InsufficientInventoryError: fewer units remain than requested
            ConflictError: still losing lock races after max_attempts
        """
        authorize(identity, UserRole.USER)
        validate_requested_quantity(quantity)

        for attempt in range(1, self.max_attempts + 1):
            async with self.uow:
                try:
                    ticket = await self.uow.ticket_repo.decrement_quantity_if_available(
                        ticket_id=ticket_id, amount=quantity
                    )
                except ConflictError:
                    if attempt == self.max_attempts:
                        raise
                    Logger.base.warning(
                        f'🔁 [RESERVE] Conflict on ticket {ticket_id}, '
                        f'retrying ({attempt}/{self.max_attempts})'
                    )
                    await self.uow.rollback()
                    await anyio.sleep(RETRY_BACKOFF_SECONDS * attempt)
                    continue

                if ticket is None:
                    existing = await self.uow.ticket_repo.get_by_id(ticket_id=ticket_id)
                    if existing is None or not existing.is_publicly_listable:
                        raise NotFoundError('Ticket not found')
                    raise InsufficientInventoryError(
                        f'Not enough tickets left for the requested quantity {quantity}'
                    )

                booking = Booking.reserve(ticket=ticket, user_email=identity.email, quantity=quantity)
                booking = await self.uow.booking_repo.create(booking=booking)
                await self.uow.commit()

            Logger.base.info(
                f'🎫 [RESERVE] Booking {booking.id}: {quantity} x ticket {ticket_id} '
                f'for {identity.email}, {ticket.quantity} left'
            )
            return booking

        raise ConflictError('Could not reserve tickets, please retry')
