from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_unit_of_work import AbstractUnitOfWork
from src.service.marketplace.app.policy.authorization import authorize
from src.service.marketplace.domain.entity.user_entity import UserEntity, UserRole
from src.service.marketplace.domain.value_object.identity import Identity


class ChangeUserRoleUseCase:
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
    async def execute(self, *, identity: Identity, user_id: str, role: str) -> UserEntity:
        authorize(identity, UserRole.ADMIN)
        new_role = UserEntity.parse_role(role)

        async with self.uow:
            user = await self.uow.user_repo.get_by_id(user_id=user_id)
            if not user:
                raise NotFoundError('User not found')

            updated = await self.uow.user_repo.update_role(
                user_id=user_id, role=user.change_role(new_role).role
            )
            if updated is None:
                raise NotFoundError('User not found')

            await self.uow.commit()

        Logger.base.info(f'🔑 [ROLE] {updated.email}: {user.role} -> {updated.role}')
        return updated
