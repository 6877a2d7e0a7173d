"""
Ticket entity

[Business Invariants]
- quantity (remaining inventory) never goes negative
- a ticket is publicly listable only when approved and not hidden
- verification status, advertisement, visibility and quantity are never
  editable by the owning vendor; a vendor edit keeps the current review outcome
"""

from datetime import datetime, timezone
from enum import StrEnum
from typing import Any, List, Mapping, Optional

import attrs
import uuid_utils

from src.platform.exception.exceptions import InvalidStatusError, ValidationError
from src.platform.logging.loguru_io import Logger


class VerificationStatus(StrEnum):
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'


# Statuses an admin may move a ticket to
REVIEW_OUTCOMES = frozenset({VerificationStatus.APPROVED, VerificationStatus.REJECTED})

VENDOR_EDITABLE_FIELDS = frozenset(
    {
        'title',
        'origin',
        'destination',
        'transport_type',
        'price',
        'departure_at',
        'perks',
        'image_url',
    }
)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _validate_text(field_name: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f'{field_name} cannot be empty')
    return value.strip()


def _validate_price(price: Any) -> float:
    if isinstance(price, bool) or not isinstance(price, int | float) or price <= 0:
        raise ValidationError('price must be a positive number')
    return float(price)


def _validate_quantity(quantity: Any) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError('quantity must be a positive integer')
    return quantity


def _validate_departure(departure_at: Any) -> datetime:
    if not isinstance(departure_at, datetime):
        raise ValidationError('departure_at must be a datetime')
    return as_utc(departure_at)


def _validate_perks(perks: Any) -> List[str]:
    if perks is None:
        return []
    if not isinstance(perks, list | tuple) or not all(isinstance(p, str) for p in perks):
        raise ValidationError('perks must be a list of strings')
    return [p.strip() for p in perks if p.strip()]


@attrs.define
class Ticket:
    title: str
    origin: str
    destination: str
    transport_type: str
    price: float
    quantity: int
    departure_at: datetime
    vendor_email: str
    id: Optional[str] = None
    perks: List[str] = attrs.field(factory=list)
    image_url: str = ''
    verification_status: VerificationStatus = VerificationStatus.PENDING
    is_advertised: bool = False
    is_hidden: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        vendor_email: str,
        title: str,
        origin: str,
        destination: str,
        transport_type: str,
        price: float,
        quantity: int,
        departure_at: datetime,
        perks: Optional[List[str]] = None,
        image_url: str = '',
    ) -> 'Ticket':
        now = datetime.now(timezone.utc)
        return cls(
            id=str(uuid_utils.uuid7()),
            title=_validate_text('title', title),
            origin=_validate_text('origin', origin),
            destination=_validate_text('destination', destination),
            transport_type=_validate_text('transport_type', transport_type),
            price=_validate_price(price),
            quantity=_validate_quantity(quantity),
            departure_at=_validate_departure(departure_at),
            perks=_validate_perks(perks),
            image_url=image_url or '',
            vendor_email=vendor_email,
            verification_status=VerificationStatus.PENDING,
            is_advertised=False,
            is_hidden=False,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_publicly_listable(self) -> bool:
        return self.verification_status == VerificationStatus.APPROVED and not self.is_hidden

    def has_departed(self, *, now: Optional[datetime] = None) -> bool:
        return self.departure_at < (now or datetime.now(timezone.utc))

    @Logger.io
    def apply_vendor_changes(self, changes: Mapping[str, Any]) -> 'Ticket':
        """
        Apply a vendor edit restricted to VENDOR_EDITABLE_FIELDS.

        Raises:
            ValidationError: unknown/protected fields or invalid values
        """
        if not changes:
            raise ValidationError('No changes supplied')

        rejected = sorted(set(changes) - VENDOR_EDITABLE_FIELDS)
        if rejected:
            raise ValidationError(f'Fields cannot be edited: {", ".join(rejected)}')

        validators = {
            'title': lambda v: _validate_text('title', v),
            'origin': lambda v: _validate_text('origin', v),
            'destination': lambda v: _validate_text('destination', v),
            'transport_type': lambda v: _validate_text('transport_type', v),
            'price': _validate_price,
            'departure_at': _validate_departure,
            'perks': _validate_perks,
            'image_url': lambda v: v or '',
        }
        cleaned = {field: validators[field](value) for field, value in changes.items()}
        return attrs.evolve(self, **cleaned, updated_at=datetime.now(timezone.utc))

    def with_verification(self, status: str) -> 'Ticket':
        try:
            new_status = VerificationStatus(status)
        except ValueError:
            new_status = None
        if new_status not in REVIEW_OUTCOMES:
            raise InvalidStatusError(
                f'Invalid verification status: {status}. Must be approved or rejected'
            )
        return attrs.evolve(
            self, verification_status=new_status, updated_at=datetime.now(timezone.utc)
        )
