from typing import Any, Mapping, Self

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


class UpdateTicketUseCase:
    """
    Owning vendor edits the descriptive fields of a ticket.

    Existing bookings keep their own snapshot and are not touched.
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
    async def execute(
        self, *, identity: Identity, ticket_id: str, changes: Mapping[str, Any]
    ) -> Ticket:
        async with self.uow:
            ticket = await self.uow.ticket_repo.get_by_id(ticket_id=ticket_id)
            if not ticket:
                raise NotFoundError('Ticket not found')

            authorize(identity, UserRole.VENDOR, resource_owner_email=ticket.vendor_email)

            edited = ticket.apply_vendor_changes(changes)
            fields = {name: getattr(edited, name) for name in changes}
            fields['updated_at'] = edited.updated_at

            updated = await self.uow.ticket_repo.update_fields(ticket_id=ticket_id, fields=fields)
            if updated is None:
                raise NotFoundError('Ticket not found')

            await self.uow.commit()

        return updated
