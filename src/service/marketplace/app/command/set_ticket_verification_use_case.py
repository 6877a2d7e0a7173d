from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_unit_of_work import AbstractUnitOfWork
from src.service.marketplace.app.policy.authorization import authorize
from src.service.marketplace.domain.entity.ticket_entity import Ticket
from src.service.marketplace.domain.entity.user_entity import UserRole
from src.service.marketplace.domain.value_object.identity import Identity


class SetTicketVerificationUseCase:
    """Admin review: approve or reject a ticket. Pending is never a valid outcome."""

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
    async def execute(self, *, identity: Identity, ticket_id: str, status: str) -> Ticket:
        authorize(identity, UserRole.ADMIN)

        async with self.uow:
            ticket = await self.uow.ticket_repo.get_by_id(ticket_id=ticket_id)
            if not ticket:
                raise NotFoundError('Ticket not found')

            reviewed = ticket.with_verification(status)
            updated = await self.uow.ticket_repo.update_fields(
                ticket_id=ticket_id,
                fields={
                    'verification_status': reviewed.verification_status,
                    'updated_at': reviewed.updated_at,
                },
            )
            if updated is None:
                raise NotFoundError('Ticket not found')

            await self.uow.commit()

        Logger.base.info(f'🔎 [REVIEW] Ticket {ticket_id} -> {updated.verification_status}')
        return updated
