from typing import Optional

import attrs

from src.service.marketplace.domain.entity.ticket_entity import VerificationStatus


@attrs.frozen
class TicketQuery:
    """Equality filters over the ticket catalog; None means "any"."""

    verification_status: Optional[VerificationStatus] = None
    is_hidden: Optional[bool] = None
    is_advertised: Optional[bool] = None
    vendor_email: Optional[str] = None

    @classmethod
    def public(cls, *, advertised_only: bool = False) -> 'TicketQuery':
        return cls(
            verification_status=VerificationStatus.APPROVED,
            is_hidden=False,
            is_advertised=True if advertised_only else None,
        )
