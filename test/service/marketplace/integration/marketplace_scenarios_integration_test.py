"""
End-to-end use case scenarios against a real (SQLite) database

Test Focus:
1. Two concurrent bookings can never oversell a ticket
2. The seventh advertisement is refused, and freeing a slot makes room again
3. Flagging a vendor hides its whole catalog in one transaction and stops new bookings
4. Payment never touches inventory; bookings keep their snapshot
"""

import asyncio

import pytest

from src.platform.exception.exceptions import (
    ForbiddenError,
    InsufficientInventoryError,
    InvalidTransitionError,
    NotFoundError,
    SlotsExhaustedError,
)
from src.service.marketplace.app.command.create_booking_use_case import CreateBookingUseCase
from src.service.marketplace.app.command.create_ticket_use_case import CreateTicketUseCase
from src.service.marketplace.app.command.decide_booking_use_case import DecideBookingUseCase
from src.service.marketplace.app.command.delete_ticket_use_case import DeleteTicketUseCase
from src.service.marketplace.app.command.mark_vendor_fraudulent_use_case import (
    MarkVendorFraudulentUseCase,
)
from src.service.marketplace.app.command.set_ticket_advertised_use_case import (
    SetTicketAdvertisedUseCase,
)
from src.service.marketplace.app.command.set_ticket_verification_use_case import (
    SetTicketVerificationUseCase,
)
from src.service.marketplace.app.command.settle_booking_payment_use_case import (
    SettleBookingPaymentUseCase,
)
from src.service.marketplace.app.command.update_ticket_use_case import UpdateTicketUseCase
from src.service.marketplace.app.query.get_ticket_use_case import GetTicketUseCase
from src.service.marketplace.app.query.list_tickets_use_case import ListTicketsUseCase
from src.service.marketplace.domain.entity.booking_entity import (
    Booking,
    BookingDecision,
    BookingStatus,
)
from src.service.marketplace.domain.entity.user_entity import UserRole


async def _reload_ticket(new_uow, ticket_id):
    async with new_uow() as uow:
        return await uow.ticket_repo.get_by_id(ticket_id=ticket_id)


@pytest.mark.integration
class TestConcurrentBooking:
    @pytest.mark.asyncio
    async def test_two_bookings_racing_for_the_last_units(
        self, new_uow, seed_ticket, user_identity, other_user_identity
    ):
        # Given: 5 left, two users each want 3
        ticket = await seed_ticket(quantity=5)

        # When
        results = await asyncio.gather(
            CreateBookingUseCase(uow=new_uow()).execute(
                identity=user_identity, ticket_id=ticket.id, quantity=3
            ),
            CreateBookingUseCase(uow=new_uow()).execute(
                identity=other_user_identity, ticket_id=ticket.id, quantity=3
            ),
            return_exceptions=True,
        )

        # Then: exactly one wins, the other sees the shortage
        bookings = [r for r in results if isinstance(r, Booking)]
        shortages = [r for r in results if isinstance(r, InsufficientInventoryError)]
        assert len(bookings) == 1
        assert len(shortages) == 1

        remaining = await _reload_ticket(new_uow, ticket.id)
        assert remaining.quantity == 2

    @pytest.mark.asyncio
    async def test_many_small_bookings_drain_exactly_to_zero(
        self, new_uow, seed_ticket, user_identity
    ):
        ticket = await seed_ticket(quantity=4)

        results = await asyncio.gather(
            *(
                CreateBookingUseCase(uow=new_uow()).execute(
                    identity=user_identity, ticket_id=ticket.id, quantity=1
                )
                for _ in range(6)
            ),
            return_exceptions=True,
        )

        assert sum(isinstance(r, Booking) for r in results) == 4
        assert sum(isinstance(r, InsufficientInventoryError) for r in results) == 2
        assert (await _reload_ticket(new_uow, ticket.id)).quantity == 0


@pytest.mark.integration
class TestAdvertisementSlots:
    async def _advertise(self, new_uow, slot_policy, admin_identity, ticket_id, advertised=True):
        return await SetTicketAdvertisedUseCase(
            uow=new_uow(), advertisement_slot_policy=slot_policy
        ).execute(identity=admin_identity, ticket_id=ticket_id, advertised=advertised)

    @pytest.mark.asyncio
    async def test_seventh_advertisement_is_refused(
        self, new_uow, seed_ticket, slot_policy, admin_identity
    ):
        tickets = [await seed_ticket(title=f'Route {i}') for i in range(7)]
        for ticket in tickets[:6]:
            await self._advertise(new_uow, slot_policy, admin_identity, ticket.id)

        with pytest.raises(SlotsExhaustedError):
            await self._advertise(new_uow, slot_policy, admin_identity, tickets[6].id)

        assert (await _reload_ticket(new_uow, tickets[6].id)).is_advertised is False
        advertised = await ListTicketsUseCase(uow=new_uow()).list_public(advertised_only=True)
        assert len(advertised) == 6

    @pytest.mark.asyncio
    async def test_withdrawing_frees_a_slot(
        self, new_uow, seed_ticket, slot_policy, admin_identity
    ):
        tickets = [await seed_ticket(title=f'Route {i}') for i in range(7)]
        for ticket in tickets[:6]:
            await self._advertise(new_uow, slot_policy, admin_identity, ticket.id)

        await self._advertise(new_uow, slot_policy, admin_identity, tickets[0].id, advertised=False)
        promoted = await self._advertise(new_uow, slot_policy, admin_identity, tickets[6].id)

        assert promoted.is_advertised is True

    @pytest.mark.asyncio
    async def test_deleting_an_advertised_ticket_frees_its_slot(
        self, new_uow, seed_ticket, slot_policy, admin_identity, vendor_identity
    ):
        tickets = [await seed_ticket(title=f'Route {i}') for i in range(7)]
        for ticket in tickets[:6]:
            await self._advertise(new_uow, slot_policy, admin_identity, ticket.id)

        await DeleteTicketUseCase(uow=new_uow(), advertisement_slot_policy=slot_policy).execute(
            identity=vendor_identity, ticket_id=tickets[0].id
        )
        promoted = await self._advertise(new_uow, slot_policy, admin_identity, tickets[6].id)

        assert promoted.is_advertised is True

    @pytest.mark.asyncio
    async def test_racing_for_the_last_slot(
        self, new_uow, seed_ticket, slot_policy, admin_identity
    ):
        tickets = [await seed_ticket(title=f'Route {i}') for i in range(7)]
        for ticket in tickets[:5]:
            await self._advertise(new_uow, slot_policy, admin_identity, ticket.id)

        results = await asyncio.gather(
            self._advertise(new_uow, slot_policy, admin_identity, tickets[5].id),
            self._advertise(new_uow, slot_policy, admin_identity, tickets[6].id),
            return_exceptions=True,
        )

        assert sum(isinstance(r, SlotsExhaustedError) for r in results) == 1
        advertised = await ListTicketsUseCase(uow=new_uow()).list_public(advertised_only=True)
        assert len(advertised) == 6


@pytest.mark.integration
class TestFraudCascade:
    @pytest.mark.asyncio
    async def test_flagged_vendor_disappears_from_the_catalog(
        self, new_uow, seed_user, seed_ticket, admin_identity, vendor_identity
    ):
        # Given: a vendor with three listed tickets, and another vendor's ticket
        vendor = await seed_user(vendor_identity.email, UserRole.VENDOR)
        for i in range(3):
            await seed_ticket(title=f'Route {i}')
        other = await seed_ticket(vendor_email='honest.vendor@example.com')

        # When
        flagged = await MarkVendorFraudulentUseCase(uow=new_uow()).execute(
            identity=admin_identity, user_id=vendor.id
        )

        # Then
        assert flagged.is_fraud_vendor is True
        public = await ListTicketsUseCase(uow=new_uow()).list_public()
        assert [t.id for t in public] == [other.id]

        vendor_view = await ListTicketsUseCase(uow=new_uow()).list_vendor_tickets(
            identity=vendor_identity
        )
        assert len(vendor_view) == 3
        assert all(t.is_hidden for t in vendor_view)

    @pytest.mark.asyncio
    async def test_flagged_vendor_tickets_can_no_longer_be_booked(
        self, new_uow, seed_user, seed_ticket, admin_identity, vendor_identity, user_identity
    ):
        # Given: a listed ticket that was bookable a moment ago
        vendor = await seed_user(vendor_identity.email, UserRole.VENDOR)
        ticket = await seed_ticket(quantity=5)
        await MarkVendorFraudulentUseCase(uow=new_uow()).execute(
            identity=admin_identity, user_id=vendor.id
        )

        # When / Then: the booking sees the same 404 as the catalog
        with pytest.raises(NotFoundError):
            await GetTicketUseCase(uow=new_uow()).get_by_id(
                ticket_id=ticket.id, identity=user_identity
            )
        with pytest.raises(NotFoundError):
            await CreateBookingUseCase(uow=new_uow()).execute(
                identity=user_identity, ticket_id=ticket.id, quantity=2
            )

        assert (await _reload_ticket(new_uow, ticket.id)).quantity == 5
        async with new_uow() as uow:
            assert await uow.booking_repo.list_by_user(user_email=user_identity.email) == []

    @pytest.mark.asyncio
    async def test_flagged_vendor_cannot_add_tickets(
        self, new_uow, seed_user, admin_identity, vendor_identity, future_departure
    ):
        vendor = await seed_user(vendor_identity.email, UserRole.VENDOR)
        await MarkVendorFraudulentUseCase(uow=new_uow()).execute(
            identity=admin_identity, user_id=vendor.id
        )

        with pytest.raises(ForbiddenError):
            await CreateTicketUseCase(uow=new_uow()).execute(
                identity=vendor_identity,
                title='Late Ferry',
                origin='Barisal',
                destination='Dhaka',
                transport_type='launch',
                price=8,
                quantity=20,
                departure_at=future_departure,
            )


@pytest.mark.integration
class TestBookingLifecycle:
    @pytest.mark.asyncio
    async def test_accept_then_pay_leaves_inventory_alone(
        self, new_uow, seed_ticket, user_identity, vendor_identity
    ):
        ticket = await seed_ticket(quantity=10)
        booking = await CreateBookingUseCase(uow=new_uow()).execute(
            identity=user_identity, ticket_id=ticket.id, quantity=2
        )
        assert (await _reload_ticket(new_uow, ticket.id)).quantity == 8

        accepted = await DecideBookingUseCase(uow=new_uow()).execute(
            identity=vendor_identity, booking_id=booking.id, decision=BookingDecision.ACCEPT
        )
        paid = await SettleBookingPaymentUseCase(uow=new_uow()).execute(
            identity=user_identity, booking_id=booking.id
        )

        assert accepted.status == BookingStatus.ACCEPTED
        assert paid.status == BookingStatus.PAID
        assert paid.paid_at is not None
        assert (await _reload_ticket(new_uow, ticket.id)).quantity == 8

    @pytest.mark.asyncio
    async def test_booking_keeps_its_snapshot_after_ticket_edit(
        self, new_uow, seed_ticket, user_identity, vendor_identity
    ):
        ticket = await seed_ticket(title='Morning Train', price=10)
        booking = await CreateBookingUseCase(uow=new_uow()).execute(
            identity=user_identity, ticket_id=ticket.id, quantity=3
        )

        await UpdateTicketUseCase(uow=new_uow()).execute(
            identity=vendor_identity,
            ticket_id=ticket.id,
            changes={'title': 'Evening Train', 'price': 14},
        )

        async with new_uow() as uow:
            stored = await uow.booking_repo.get_by_id(booking_id=booking.id)
        assert stored.ticket_title == 'Morning Train'
        assert stored.unit_price == pytest.approx(10)
        assert stored.total_price == pytest.approx(30)


@pytest.mark.integration
class TestVendorToPaymentScenario:
    @pytest.mark.asyncio
    async def test_full_lifecycle_then_fraud(
        self,
        new_uow,
        seed_user,
        vendor_identity,
        admin_identity,
        user_identity,
        other_user_identity,
        future_departure,
    ):
        vendor = await seed_user(vendor_identity.email, UserRole.VENDOR)

        # Vendor V creates T (quantity=2, price=10), admin approves it
        ticket = await CreateTicketUseCase(uow=new_uow()).execute(
            identity=vendor_identity,
            title='Khulna Express',
            origin='Dhaka',
            destination='Khulna',
            transport_type='train',
            price=10,
            quantity=2,
            departure_at=future_departure,
        )
        await SetTicketVerificationUseCase(uow=new_uow()).execute(
            identity=admin_identity, ticket_id=ticket.id, status='approved'
        )

        # U books both units for 20, a second user finds none left
        booking = await CreateBookingUseCase(uow=new_uow()).execute(
            identity=user_identity, ticket_id=ticket.id, quantity=2
        )
        assert booking.total_price == pytest.approx(20)
        assert (await _reload_ticket(new_uow, ticket.id)).quantity == 0
        with pytest.raises(InsufficientInventoryError):
            await CreateBookingUseCase(uow=new_uow()).execute(
                identity=other_user_identity, ticket_id=ticket.id, quantity=1
            )

        # V accepts exactly once, U pays before departure
        await DecideBookingUseCase(uow=new_uow()).execute(
            identity=vendor_identity, booking_id=booking.id, decision=BookingDecision.ACCEPT
        )
        with pytest.raises(InvalidTransitionError):
            await DecideBookingUseCase(uow=new_uow()).execute(
                identity=vendor_identity, booking_id=booking.id, decision=BookingDecision.REJECT
            )
        paid = await SettleBookingPaymentUseCase(uow=new_uow()).execute(
            identity=user_identity, booking_id=booking.id
        )
        assert paid.status == BookingStatus.PAID

        # Admin flags V: T is hidden although still approved
        await MarkVendorFraudulentUseCase(uow=new_uow()).execute(
            identity=admin_identity, user_id=vendor.id
        )
        hidden = await _reload_ticket(new_uow, ticket.id)
        assert hidden.is_hidden is True
        assert hidden.is_publicly_listable is False
        assert await ListTicketsUseCase(uow=new_uow()).list_public() == []
