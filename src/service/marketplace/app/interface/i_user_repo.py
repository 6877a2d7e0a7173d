from abc import ABC, abstractmethod
from typing import List

from src.service.marketplace.domain.entity.user_entity import UserEntity, UserRole


class IUserRepo(ABC):
    @abstractmethod
    async def get_by_email(self, *, email: str) -> UserEntity | None:
        pass

    @abstractmethod
    async def get_by_id(self, *, user_id: str) -> UserEntity | None:
        pass

    @abstractmethod
    async def upsert(self, *, user: UserEntity) -> UserEntity:
        """
        Insert the user unless one with the same email exists.

        Returns:
            The stored user (the pre-existing one when the email is taken)
        """
        pass

    @abstractmethod
    async def list_all(self) -> List[UserEntity]:
        pass

    @abstractmethod
    async def update_role(self, *, user_id: str, role: UserRole) -> UserEntity | None:
        pass

    @abstractmethod
    async def update_fraud_flag(self, *, user_id: str, is_fraud: bool) -> UserEntity | None:
        pass
