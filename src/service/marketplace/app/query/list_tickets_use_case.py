from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import InvalidStatusError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.dto.ticket_query import TicketQuery
from src.service.marketplace.app.interface.i_unit_of_work import AbstractUnitOfWork
from src.service.marketplace.app.policy.authorization import authorize
from src.service.marketplace.domain.entity.ticket_entity import Ticket, VerificationStatus
from src.service.marketplace.domain.entity.user_entity import UserRole
from src.service.marketplace.domain.value_object.identity import Identity


class ListTicketsUseCase:
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
    async def list_public(self, *, advertised_only: bool = False) -> List[Ticket]:
        """Approved, not hidden tickets; optionally only the advertised ones."""
        async with self.uow:
            return await self.uow.ticket_repo.list_by_query(
                query=TicketQuery.public(advertised_only=advertised_only)
            )

    @Logger.io
    async def list_vendor_tickets(self, *, identity: Identity) -> List[Ticket]:
        authorize(identity, UserRole.VENDOR)
        async with self.uow:
            return await self.uow.ticket_repo.list_by_vendor(vendor_email=identity.email)

    @Logger.io
    async def list_for_review(
        self, *, identity: Identity, verification_status: Optional[str] = None
    ) -> List[Ticket]:
        """Admin catalog view, hidden tickets included, optionally narrowed to one status."""
        authorize(identity, UserRole.ADMIN)

        status = None
        if verification_status:
            try:
                status = VerificationStatus(verification_status)
            except ValueError:
                raise InvalidStatusError(f'Invalid verification status: {verification_status}')

        async with self.uow:
            return await self.uow.ticket_repo.list_by_query(
                query=TicketQuery(verification_status=status)
            )
