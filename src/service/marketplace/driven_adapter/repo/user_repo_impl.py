from typing import Any, List, Mapping

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_user_repo import IUserRepo
from src.service.marketplace.domain.entity.ticket_entity import as_utc
from src.service.marketplace.domain.entity.user_entity import UserEntity, UserRole
from src.service.marketplace.driven_adapter.model.user_model import UserModel


_users = UserModel.__table__


class UserRepoImpl(IUserRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _row_to_entity(row: Mapping[str, Any]) -> UserEntity:
        return UserEntity(
            id=row['id'],
            email=row['email'],
            name=row['name'],
            photo_url=row['photo_url'],
            role=UserRole(row['role']),
            is_fraud=row['is_fraud'],
            created_at=as_utc(row['created_at']) if row['created_at'] else None,
        )

    async def _fetch_one(self, *where: Any) -> UserEntity | None:
        result = await self.session.execute(select(_users).where(*where))
        row = result.first()
        return self._row_to_entity(row._mapping) if row else None

    @Logger.io
    async def get_by_email(self, *, email: str) -> UserEntity | None:
        return await self._fetch_one(_users.c.email == email)

    @Logger.io
    async def get_by_id(self, *, user_id: str) -> UserEntity | None:
        return await self._fetch_one(_users.c.id == user_id)

    @Logger.io
    async def upsert(self, *, user: UserEntity) -> UserEntity:
        existing = await self.get_by_email(email=user.email)
        if existing:
            return existing

        try:
            result = await self.session.execute(
                insert(_users)
                .values(
                    id=user.id,
                    email=user.email,
                    name=user.name,
                    photo_url=user.photo_url,
                    role=user.role.value,
                    is_fraud=user.is_fraud,
                    created_at=user.created_at,
                )
                .returning(*_users.c)
            )
        except IntegrityError as e:
            # Same email inserted by a concurrent request after our read
            raise ConflictError(f'User {user.email} is being registered concurrently') from e
        return self._row_to_entity(result.one()._mapping)

    @Logger.io
    async def list_all(self) -> List[UserEntity]:
        result = await self.session.execute(
            select(_users).order_by(_users.c.created_at)
        )
        return [self._row_to_entity(row._mapping) for row in result]

    async def _update_returning(self, user_id: str, **values: Any) -> UserEntity | None:
        result = await self.session.execute(
            update(_users)
            .where(_users.c.id == user_id)
            .values(**values)
            .returning(*_users.c)
        )
        row = result.first()
        return self._row_to_entity(row._mapping) if row else None

    @Logger.io
    async def update_role(self, *, user_id: str, role: UserRole) -> UserEntity | None:
        return await self._update_returning(user_id, role=role.value)

    @Logger.io
    async def update_fraud_flag(self, *, user_id: str, is_fraud: bool) -> UserEntity | None:
        return await self._update_returning(user_id, is_fraud=is_fraud)
