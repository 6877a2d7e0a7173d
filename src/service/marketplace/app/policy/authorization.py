from typing import Optional

from src.platform.exception.exceptions import ForbiddenError
from src.service.marketplace.domain.entity.user_entity import UserRole
from src.service.marketplace.domain.value_object.identity import Identity


def authorize(
    identity: Identity,
    required_role: UserRole,
    resource_owner_email: Optional[str] = None,
) -> Identity:
    """
    Exact role match (roles are disjoint: an ADMIN does not pass a VENDOR check),
    plus ownership when the resource has an owner.

    Raises:
        ForbiddenError: wrong role, or not the owner of the resource
    """
    if identity.role != required_role:
        raise ForbiddenError(f'Only {required_role.value.lower()}s can perform this action')
    if resource_owner_email is not None and identity.email != resource_owner_email:
        raise ForbiddenError('You do not own this resource')
    return identity
