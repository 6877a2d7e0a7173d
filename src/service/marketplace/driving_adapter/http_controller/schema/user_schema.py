"""
User API Schemas - Pydantic models for request/response
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from src.service.marketplace.domain.entity.user_entity import UserRole


class LoginRequest(BaseModel):
    """Sign-in after the identity provider vouched for the email"""

    # Anything else (a "role" in particular) is dropped
    model_config = ConfigDict(
        extra='ignore',
        json_schema_extra={
            'example': {'email': 'user@example.com', 'name': 'John Doe', 'photo_url': ''}
        },
    )

    email: EmailStr
    name: str = Field('', max_length=255)
    photo_url: str = Field('', max_length=1024)


class ChangeRoleRequest(BaseModel):
    model_config = ConfigDict(json_schema_extra={'example': {'role': 'VENDOR'}})

    role: str


class UserResponse(BaseModel):
    """User response schema"""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    photo_url: str
    role: UserRole
    is_fraud: bool
    created_at: Optional[datetime] = None


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = 'bearer'
    user: UserResponse


class RoleResponse(BaseModel):
    role: UserRole
