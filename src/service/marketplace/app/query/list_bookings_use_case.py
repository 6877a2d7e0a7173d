from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_unit_of_work import AbstractUnitOfWork
from src.service.marketplace.app.policy.authorization import authorize
from src.service.marketplace.domain.entity.booking_entity import Booking
from src.service.marketplace.domain.entity.user_entity import UserRole
from src.service.marketplace.domain.value_object.identity import Identity


class ListBookingsUseCase:
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
    async def list_user_bookings(self, *, identity: Identity) -> List[Booking]:
        async with self.uow:
            return await self.uow.booking_repo.list_by_user(user_email=identity.email)

    @Logger.io
    async def list_vendor_bookings(self, *, identity: Identity) -> List[Booking]:
        authorize(identity, UserRole.VENDOR)
        async with self.uow:
            return await self.uow.booking_repo.list_by_vendor(vendor_email=identity.email)
