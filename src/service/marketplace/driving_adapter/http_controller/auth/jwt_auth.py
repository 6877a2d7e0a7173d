"""
Bearer token issuing and verification
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import jwt

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import AuthenticationError
from src.service.marketplace.domain.entity.user_entity import UserEntity, UserRole
from src.service.marketplace.domain.value_object.identity import Identity


class JwtAuth:
    def __init__(self) -> None:
        self.secret = settings.SECRET_KEY.get_secret_value()
        self.algorithm = settings.ALGORITHM
        self.token_expire_minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES

    def create_jwt_token(self, user_entity: UserEntity) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            'sub': user_entity.email,
            'exp': now + timedelta(minutes=self.token_expire_minutes),
            'iat': now,
            'email': user_entity.email,
            'role': user_entity.role.value,
        }

        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_jwt_token(self, token: str) -> Dict:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.PyJWTError as e:
            raise AuthenticationError('Invalid token') from e

    def get_identity_from_jwt(self, token: Optional[str]) -> Identity:
        if not token:
            raise AuthenticationError('Not authenticated')

        payload = self.decode_jwt_token(token)

        email = payload.get('email')
        role = payload.get('role')
        if not email or role not in {r.value for r in UserRole}:
            raise AuthenticationError('Invalid token')

        # Identity is rebuilt from the token alone (no DB query)
        return Identity(email=email, role=UserRole(role))
