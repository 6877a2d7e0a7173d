from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.platform.config.di import Container
from src.service.marketplace.domain.value_object.identity import Identity
from src.service.marketplace.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


bearer_scheme = HTTPBearer(auto_error=False)


@inject
async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> Identity:
    """Caller identity from the bearer token (stateless, no DB query)."""
    return jwt_auth.get_identity_from_jwt(credentials.credentials if credentials else None)


@inject
async def get_optional_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> Optional[Identity]:
    """Like get_current_identity, but anonymous callers get None instead of a 401."""
    if credentials is None:
        return None
    return jwt_auth.get_identity_from_jwt(credentials.credentials)
