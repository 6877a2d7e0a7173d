from datetime import datetime, timezone
from enum import StrEnum
from typing import Optional

import attrs
import uuid_utils

from src.platform.exception.exceptions import InvalidTargetError, ValidationError


class UserRole(StrEnum):
    USER = 'USER'
    VENDOR = 'VENDOR'
    ADMIN = 'ADMIN'


@attrs.define
class UserEntity:
    email: str
    name: str = ''
    photo_url: str = ''
    role: UserRole = UserRole.USER
    is_fraud: bool = False
    id: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def create(cls, *, email: str, name: str = '', photo_url: str = '') -> 'UserEntity':
        """New accounts always start as USER; roles are only granted by an admin."""
        if not email or not email.strip():
            raise ValidationError('Email required')

        return cls(
            id=str(uuid_utils.uuid7()),
            email=email.strip(),
            name=name.strip() if name else 'User',
            photo_url=photo_url or '',
            role=UserRole.USER,
            is_fraud=False,
            created_at=datetime.now(timezone.utc),
        )

    @property
    def is_fraud_vendor(self) -> bool:
        # The fraud flag only has an effect on vendors
        return self.role == UserRole.VENDOR and self.is_fraud

    def mark_as_fraud(self) -> 'UserEntity':
        if self.role != UserRole.VENDOR:
            raise InvalidTargetError('Only vendors can be marked as fraud')
        return attrs.evolve(self, is_fraud=True)

    def change_role(self, role: UserRole) -> 'UserEntity':
        return attrs.evolve(self, role=role)

    @staticmethod
    def parse_role(role: str) -> UserRole:
        """Validate if the role is valid"""
        try:
            return UserRole(str(role).upper())
        except ValueError:
            valid_roles = ', '.join(r.value for r in UserRole)
            raise ValidationError(f'Invalid role: {role}. Must be one of: {valid_roles}')
