"""
Unit tests for Ticket entity

Test Focus:
1. Creation validates price, quantity and required text
2. New tickets start pending, not advertised, not hidden
3. Vendor edits are restricted to descriptive fields
4. Verification only accepts approved/rejected
"""

from datetime import datetime, timedelta, timezone

import pytest

from src.platform.exception.exceptions import InvalidStatusError, ValidationError
from src.service.marketplace.domain.entity.ticket_entity import Ticket, VerificationStatus


def _create(**overrides):
    params = {
        'vendor_email': 'vendor@example.com',
        'title': 'Night Train',
        'origin': 'Dhaka',
        'destination': 'Sylhet',
        'transport_type': 'train',
        'price': 12.5,
        'quantity': 30,
        'departure_at': datetime.now(timezone.utc) + timedelta(days=3),
    }
    params.update(overrides)
    return Ticket.create(**params)


@pytest.mark.unit
class TestTicketCreation:
    def test_new_ticket_starts_pending_and_unlisted(self):
        ticket = _create()

        assert ticket.id is not None
        assert ticket.verification_status == VerificationStatus.PENDING
        assert ticket.is_advertised is False
        assert ticket.is_hidden is False
        assert ticket.is_publicly_listable is False

    @pytest.mark.parametrize('price', [0, -1, 'free', True])
    def test_rejects_non_positive_price(self, price):
        with pytest.raises(ValidationError, match='price'):
            _create(price=price)

    @pytest.mark.parametrize('quantity', [0, -3, 1.5])
    def test_rejects_non_positive_quantity(self, quantity):
        with pytest.raises(ValidationError, match='quantity'):
            _create(quantity=quantity)

    def test_rejects_blank_title(self):
        with pytest.raises(ValidationError, match='title cannot be empty'):
            _create(title='   ')

    def test_naive_departure_is_read_as_utc(self):
        naive = datetime(2030, 1, 1, 8, 0)

        ticket = _create(departure_at=naive)

        assert ticket.departure_at == datetime(2030, 1, 1, 8, 0, tzinfo=timezone.utc)


@pytest.mark.unit
class TestTicketVisibility:
    def test_approved_and_visible_ticket_is_listable(self):
        ticket = _create()
        ticket.verification_status = VerificationStatus.APPROVED

        assert ticket.is_publicly_listable is True

    def test_hidden_ticket_is_never_listable(self):
        ticket = _create()
        ticket.verification_status = VerificationStatus.APPROVED
        ticket.is_hidden = True

        assert ticket.is_publicly_listable is False


@pytest.mark.unit
class TestVendorChanges:
    def test_applies_descriptive_changes(self):
        ticket = _create()

        edited = ticket.apply_vendor_changes({'title': 'Day Train', 'price': 15})

        assert edited.title == 'Day Train'
        assert edited.price == 15.0
        assert edited.quantity == ticket.quantity
        assert ticket.title == 'Night Train'

    @pytest.mark.parametrize(
        'field', ['quantity', 'verification_status', 'is_advertised', 'is_hidden', 'vendor_email']
    )
    def test_protected_fields_are_rejected(self, field):
        ticket = _create()

        with pytest.raises(ValidationError, match='cannot be edited'):
            ticket.apply_vendor_changes({field: True})

    def test_empty_change_set_is_rejected(self):
        with pytest.raises(ValidationError, match='No changes'):
            _create().apply_vendor_changes({})

    def test_edit_keeps_the_review_outcome(self):
        approved = _create().with_verification('approved')

        edited = approved.apply_vendor_changes({'price': 40, 'origin': 'Rajshahi'})

        assert edited.verification_status == VerificationStatus.APPROVED
        assert edited.is_publicly_listable is True

    def test_edited_price_must_stay_positive(self):
        with pytest.raises(ValidationError, match='price'):
            _create().apply_vendor_changes({'price': 0})


@pytest.mark.unit
class TestVerification:
    @pytest.mark.parametrize('status', ['approved', 'rejected'])
    def test_review_outcomes_are_accepted(self, status):
        reviewed = _create().with_verification(status)

        assert reviewed.verification_status == VerificationStatus(status)

    @pytest.mark.parametrize('status', ['pending', 'banana', ''])
    def test_anything_else_is_an_invalid_status(self, status):
        with pytest.raises(InvalidStatusError):
            _create().with_verification(status)
