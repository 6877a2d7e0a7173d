from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_unit_of_work import AbstractUnitOfWork
from src.service.marketplace.domain.entity.user_entity import UserEntity


class RegisterUserUseCase:
    """Idempotent sign-in: returns the stored user, creating it as USER on first sight."""

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
    async def execute(self, *, email: str, name: str = '', photo_url: str = '') -> UserEntity:
        candidate = UserEntity.create(email=email, name=name, photo_url=photo_url)

        async with self.uow:
            user = await self.uow.user_repo.upsert(user=candidate)
            await self.uow.commit()

        if user.id == candidate.id:
            Logger.base.info(f'👤 [REGISTER] New user {user.email}')
        return user
