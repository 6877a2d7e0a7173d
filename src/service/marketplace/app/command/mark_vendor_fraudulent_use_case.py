"""
Mark Vendor Fraudulent Use Case

The fraud flag and the hiding of every ticket the vendor owns are written in
one unit of work: either both are committed or neither is.
"""

from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import CascadeIncompleteError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_unit_of_work import AbstractUnitOfWork
from src.service.marketplace.app.policy.authorization import authorize
from src.service.marketplace.app.policy.fraud_cascade_policy import FraudCascadePolicy
from src.service.marketplace.domain.entity.user_entity import UserEntity, UserRole
from src.service.marketplace.domain.value_object.identity import Identity


class MarkVendorFraudulentUseCase:
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
    async def execute(self, *, identity: Identity, user_id: str) -> UserEntity:
        """
        Raises:
            ForbiddenError: caller is not an ADMIN
            NotFoundError: no such user
            InvalidTargetError: the user is not a VENDOR
            CascadeIncompleteError: the flag or the cascade could not be written;
                nothing was committed
        """
        authorize(identity, UserRole.ADMIN)

        async with self.uow:
            user = await self.uow.user_repo.get_by_id(user_id=user_id)
            if not user:
                raise NotFoundError('User not found')

            flagged = user.mark_as_fraud()

            try:
                updated = await self.uow.user_repo.update_fraud_flag(
                    user_id=user_id, is_fraud=flagged.is_fraud
                )
                if updated is None:
                    raise NotFoundError('User not found')
                hidden_count = await FraudCascadePolicy.on_vendor_marked_fraudulent(
                    ticket_repo=self.uow.ticket_repo, vendor_email=updated.email
                )
                await self.uow.commit()
            except Exception as e:
                raise CascadeIncompleteError(
                    f'Could not mark vendor {user.email} as fraud, no changes were saved'
                ) from e

        Logger.base.warning(
            f'🚫 [FRAUD] Vendor {updated.email} flagged, {hidden_count} tickets hidden'
        )
        return updated
