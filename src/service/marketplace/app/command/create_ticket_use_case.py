from datetime import datetime
from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_unit_of_work import AbstractUnitOfWork
from src.service.marketplace.app.policy.authorization import authorize
from src.service.marketplace.domain.entity.ticket_entity import Ticket
from src.service.marketplace.domain.entity.user_entity import UserRole
from src.service.marketplace.domain.value_object.identity import Identity


class CreateTicketUseCase:
    """
    Vendor publishes a ticket. It starts pending review, not advertised and
    not hidden; an admin has to approve it before it is publicly listed.
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
        self,
        *,
        identity: Identity,
        title: str,
        origin: str,
        destination: str,
        transport_type: str,
        price: float,
        quantity: int,
        departure_at: datetime,
        perks: Optional[List[str]] = None,
        image_url: str = '',
    ) -> Ticket:
        authorize(identity, UserRole.VENDOR)

        ticket = Ticket.create(
            vendor_email=identity.email,
            title=title,
            origin=origin,
            destination=destination,
            transport_type=transport_type,
            price=price,
            quantity=quantity,
            departure_at=departure_at,
            perks=perks,
            image_url=image_url,
        )

        async with self.uow:
            vendor = await self.uow.user_repo.get_by_email(email=identity.email)
            if vendor and vendor.is_fraud_vendor:
                raise ForbiddenError('Vendor is flagged as fraud and cannot add tickets')

            created = await self.uow.ticket_repo.create(ticket=ticket)
            await self.uow.commit()

        Logger.base.info(f'🎟️ [TICKET] {identity.email} added ticket {created.id}')
        return created
