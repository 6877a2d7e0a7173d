from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_unit_of_work import AbstractUnitOfWork
from src.service.marketplace.domain.entity.ticket_entity import Ticket
from src.service.marketplace.domain.entity.user_entity import UserRole
from src.service.marketplace.domain.value_object.identity import Identity


class GetTicketUseCase:
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
    async def get_by_id(self, *, ticket_id: str, identity: Optional[Identity] = None) -> Ticket:
        """
        Tickets that are not publicly listable only exist for an admin or the
        owning vendor; anyone else gets NotFoundError, as if it were absent.
        """
        async with self.uow:
            ticket = await self.uow.ticket_repo.get_by_id(ticket_id=ticket_id)

        if ticket is None or not (ticket.is_publicly_listable or _can_see_unlisted(identity, ticket)):
            raise NotFoundError('Ticket not found')
        return ticket


def _can_see_unlisted(identity: Optional[Identity], ticket: Ticket) -> bool:
    if identity is None:
        return False
    if identity.role == UserRole.ADMIN:
        return True
    return identity.role == UserRole.VENDOR and identity.email == ticket.vendor_email
