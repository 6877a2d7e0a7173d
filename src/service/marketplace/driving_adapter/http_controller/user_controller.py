from typing import List

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.command.change_user_role_use_case import ChangeUserRoleUseCase
from src.service.marketplace.app.command.mark_vendor_fraudulent_use_case import (
    MarkVendorFraudulentUseCase,
)
from src.service.marketplace.app.command.register_user_use_case import RegisterUserUseCase
from src.service.marketplace.app.query.user_query_use_case import UserQueryUseCase
from src.service.marketplace.domain.value_object.identity import Identity
from src.service.marketplace.driving_adapter.http_controller.auth.jwt_auth import JwtAuth
from src.service.marketplace.driving_adapter.http_controller.auth.role_auth import (
    get_current_identity,
)
from src.service.marketplace.driving_adapter.http_controller.schema.user_schema import (
    ChangeRoleRequest,
    LoginRequest,
    LoginResponse,
    RoleResponse,
    UserResponse,
)


# === API Router ===

router = APIRouter()


@router.post('/login', response_model=LoginResponse)
@Logger.io
@inject
async def login(
    request: LoginRequest,
    use_case: RegisterUserUseCase = Depends(RegisterUserUseCase.depends),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> LoginResponse:
    """Register on first sign-in, then hand out a bearer token carrying the stored role."""
    user = await use_case.execute(
        email=request.email, name=request.name, photo_url=request.photo_url
    )
    return LoginResponse(
        access_token=jwt_auth.create_jwt_token(user),
        user=UserResponse.model_validate(user),
    )


@router.get('/role/{email}', response_model=RoleResponse)
@Logger.io
async def get_user_role(
    email: str,
    _identity: Identity = Depends(get_current_identity),
    use_case: UserQueryUseCase = Depends(UserQueryUseCase.depends),
) -> RoleResponse:
    return RoleResponse(role=await use_case.get_user_role(email=email))


@router.get('', response_model=List[UserResponse])
@Logger.io
async def list_users(
    identity: Identity = Depends(get_current_identity),
    use_case: UserQueryUseCase = Depends(UserQueryUseCase.depends),
) -> List[UserResponse]:
    users = await use_case.list_users(identity=identity)
    return [UserResponse.model_validate(user) for user in users]


@router.patch('/{user_id}/role', response_model=UserResponse)
@Logger.io
async def change_user_role(
    user_id: str,
    request: ChangeRoleRequest,
    identity: Identity = Depends(get_current_identity),
    use_case: ChangeUserRoleUseCase = Depends(ChangeUserRoleUseCase.depends),
) -> UserResponse:
    user = await use_case.execute(identity=identity, user_id=user_id, role=request.role)
    return UserResponse.model_validate(user)


@router.patch('/{user_id}/fraud', response_model=UserResponse)
@Logger.io
async def mark_vendor_fraudulent(
    user_id: str,
    identity: Identity = Depends(get_current_identity),
    use_case: MarkVendorFraudulentUseCase = Depends(MarkVendorFraudulentUseCase.depends),
) -> UserResponse:
    user = await use_case.execute(identity=identity, user_id=user_id)
    return UserResponse.model_validate(user)
