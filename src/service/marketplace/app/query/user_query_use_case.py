"""
User Query Use Cases (Use Case Layer)
"""

from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_unit_of_work import AbstractUnitOfWork
from src.service.marketplace.app.policy.authorization import authorize
from src.service.marketplace.domain.entity.user_entity import UserEntity, UserRole
from src.service.marketplace.domain.value_object.identity import Identity


class UserQueryUseCase:
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
    async def get_user_role(self, *, email: str) -> UserRole:
        async with self.uow:
            user = await self.uow.user_repo.get_by_email(email=email)
        if not user:
            raise NotFoundError('User not found')
        return user.role

    @Logger.io
    async def list_users(self, *, identity: Identity) -> List[UserEntity]:
        authorize(identity, UserRole.ADMIN)
        async with self.uow:
            return await self.uow.user_repo.list_all()
