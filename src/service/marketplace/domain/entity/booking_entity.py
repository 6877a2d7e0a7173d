from datetime import datetime, timezone
from enum import StrEnum
from typing import Any, Optional

import attrs
import uuid_utils

from src.platform.exception.exceptions import InvalidTransitionError, ValidationError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.domain.entity.ticket_entity import Ticket


class BookingStatus(StrEnum):
    PENDING = 'pending'
    ACCEPTED = 'accepted'
    REJECTED = 'rejected'
    PAID = 'paid'


class BookingDecision(StrEnum):
    ACCEPT = 'accept'
    REJECT = 'reject'


# pending -> accepted | rejected | paid, accepted -> paid; rejected and paid are terminal
ALLOWED_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset(
        {BookingStatus.ACCEPTED, BookingStatus.REJECTED, BookingStatus.PAID}
    ),
    BookingStatus.ACCEPTED: frozenset({BookingStatus.PAID}),
    BookingStatus.REJECTED: frozenset(),
    BookingStatus.PAID: frozenset(),
}


def sources_of(target: BookingStatus) -> frozenset[BookingStatus]:
    """Statuses from which `target` is reachable in one step."""
    return frozenset(
        source for source, targets in ALLOWED_TRANSITIONS.items() if target in targets
    )


def validate_requested_quantity(quantity: Any) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValidationError('quantity must be a positive integer')
    return quantity


@attrs.define
class Booking:
    id: str
    ticket_id: str
    user_email: str
    vendor_email: str
    quantity: int
    unit_price: float
    total_price: float
    # Snapshot of the ticket at booking time
    ticket_title: str
    origin: str
    destination: str
    departure_at: datetime
    ticket_image_url: str = ''
    status: BookingStatus = BookingStatus.PENDING
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def reserve(cls, *, ticket: Ticket, user_email: str, quantity: int) -> 'Booking':
        """
        Build a pending booking from an already-reserved ticket.

        The total price is always derived from the ticket price; the vendor is
        copied from the ticket so both stay consistent for the booking's lifetime.
        """
        if ticket.id is None:
            raise ValueError('Ticket must be persisted before it can be booked')

        now = datetime.now(timezone.utc)
        return cls(
            id=str(uuid_utils.uuid7()),
            ticket_id=ticket.id,
            user_email=user_email,
            vendor_email=ticket.vendor_email,
            quantity=validate_requested_quantity(quantity),
            unit_price=ticket.price,
            total_price=round(ticket.price * quantity, 2),
            ticket_title=ticket.title,
            ticket_image_url=ticket.image_url,
            origin=ticket.origin,
            destination=ticket.destination,
            departure_at=ticket.departure_at,
            status=BookingStatus.PENDING,
            created_at=now,
            updated_at=now,
        )

    def can_transition_to(self, status: BookingStatus) -> bool:
        return status in ALLOWED_TRANSITIONS[self.status]

    def _transition_to(self, status: BookingStatus, **changes: Any) -> 'Booking':
        if not self.can_transition_to(status):
            raise InvalidTransitionError(
                f'Booking cannot move from {self.status.value} to {status.value}'
            )
        return attrs.evolve(
            self, status=status, updated_at=datetime.now(timezone.utc), **changes
        )

    @Logger.io
    def decide(self, decision: BookingDecision) -> 'Booking':
        """Vendor decisions are only possible while the booking is pending."""
        if self.status != BookingStatus.PENDING:
            raise InvalidTransitionError(
                f'Booking is already {self.status.value}; only pending bookings can be decided'
            )
        target = (
            BookingStatus.ACCEPTED if decision == BookingDecision.ACCEPT else BookingStatus.REJECTED
        )
        return self._transition_to(target)

    @Logger.io
    def mark_as_paid(self) -> 'Booking':
        if self.status == BookingStatus.PAID:
            raise InvalidTransitionError('Booking already paid')
        if self.status == BookingStatus.REJECTED:
            raise InvalidTransitionError('Cannot pay for rejected booking')
        return self._transition_to(BookingStatus.PAID, paid_at=datetime.now(timezone.utc))
