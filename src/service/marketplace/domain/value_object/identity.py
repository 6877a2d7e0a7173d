import attrs

from src.service.marketplace.domain.entity.user_entity import UserRole


@attrs.frozen
class Identity:
    """Already-authenticated caller, as handed to every use case."""

    email: str
    role: UserRole

    def is_role(self, role: UserRole) -> bool:
        return self.role == role
