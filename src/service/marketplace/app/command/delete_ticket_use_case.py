from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_unit_of_work import AbstractUnitOfWork
from src.service.marketplace.app.policy.advertisement_slot_policy import AdvertisementSlotPolicy
from src.service.marketplace.app.policy.authorization import authorize
from src.service.marketplace.domain.entity.user_entity import UserRole
from src.service.marketplace.domain.value_object.identity import Identity


class DeleteTicketUseCase:
    def __init__(
        self, *, uow: AbstractUnitOfWork, advertisement_slot_policy: AdvertisementSlotPolicy
    ) -> None:
        self.uow = uow
        self.advertisement_slot_policy = advertisement_slot_policy

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        advertisement_slot_policy: AdvertisementSlotPolicy = Depends(
            Provide[Container.advertisement_slot_policy]
        ),
    ) -> Self:
        return cls(uow=uow, advertisement_slot_policy=advertisement_slot_policy)

    @Logger.io
    async def execute(self, *, identity: Identity, ticket_id: str) -> None:
        async with self.uow:
            ticket = await self.uow.ticket_repo.get_by_id(ticket_id=ticket_id)
            if not ticket:
                raise NotFoundError('Ticket not found')

            authorize(identity, UserRole.VENDOR, resource_owner_email=ticket.vendor_email)

            # An advertised ticket gives its slot back before it disappears
            await self.advertisement_slot_policy.withdraw(
                ticket_repo=self.uow.ticket_repo, ticket=ticket
            )

            if not await self.uow.ticket_repo.delete(ticket_id=ticket_id):
                raise NotFoundError('Ticket not found')

            await self.uow.commit()

        Logger.base.info(f'🗑️ [TICKET] {identity.email} deleted ticket {ticket_id}')
