from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_unit_of_work import AbstractUnitOfWork
from src.service.marketplace.app.policy.advertisement_slot_policy import AdvertisementSlotPolicy
from src.service.marketplace.app.policy.authorization import authorize
from src.service.marketplace.domain.entity.ticket_entity import Ticket
from src.service.marketplace.domain.entity.user_entity import UserRole
from src.service.marketplace.domain.value_object.identity import Identity


class SetTicketAdvertisedUseCase:
    """
    Admin promotes a ticket to (or withdraws it from) the advertised set.

    Idempotent both ways. The slot claim and the flag flip share one
    transaction, so a rejected promotion leaves nothing behind.
    """

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
    async def execute(self, *, identity: Identity, ticket_id: str, advertised: bool) -> Ticket:
        authorize(identity, UserRole.ADMIN)

        async with self.uow:
            ticket = await self.uow.ticket_repo.get_by_id(ticket_id=ticket_id)
            if not ticket:
                raise NotFoundError('Ticket not found')

            if advertised:
                result = await self.advertisement_slot_policy.promote(
                    ticket_repo=self.uow.ticket_repo, ticket=ticket
                )
            else:
                result = await self.advertisement_slot_policy.withdraw(
                    ticket_repo=self.uow.ticket_repo, ticket=ticket
                )

            await self.uow.commit()

        return result
