"""
Ticket Repository Implementation (SQLAlchemy Core)

Inventory and advertisement changes are conditional UPDATE statements: the
check lives in the WHERE clause, so the database row lock (or SQLite's write
lock) decides which of two concurrent requests wins. Nothing is read first
and written later.
"""

from datetime import datetime, timezone
from typing import Any, List, Mapping

from sqlalchemy import delete, false, func, insert, select, true, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.database.db_conflict import raise_conflict_on_lock
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.dto.ticket_query import TicketQuery
from src.service.marketplace.app.interface.i_ticket_repo import ITicketRepo
from src.service.marketplace.domain.entity.ticket_entity import (
    Ticket,
    VerificationStatus,
    as_utc,
)
from src.service.marketplace.driven_adapter.model.advertisement_slot_model import (
    ADVERTISEMENT_SLOT_ROW_ID,
    AdvertisementSlotModel,
)
from src.service.marketplace.driven_adapter.model.ticket_model import TicketModel


_tickets = TicketModel.__table__
_slots = AdvertisementSlotModel.__table__


class TicketRepoImpl(ITicketRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _row_to_entity(row: Mapping[str, Any]) -> Ticket:
        return Ticket(
            id=row['id'],
            title=row['title'],
            origin=row['origin'],
            destination=row['destination'],
            transport_type=row['transport_type'],
            price=row['price'],
            quantity=row['quantity'],
            departure_at=as_utc(row['departure_at']),
            perks=list(row['perks'] or []),
            image_url=row['image_url'],
            vendor_email=row['vendor_email'],
            verification_status=VerificationStatus(row['verification_status']),
            is_advertised=row['is_advertised'],
            is_hidden=row['is_hidden'],
            created_at=as_utc(row['created_at']) if row['created_at'] else None,
            updated_at=as_utc(row['updated_at']) if row['updated_at'] else None,
        )

    async def _update_returning(self, *where: Any, **values: Any) -> Ticket | None:
        async with raise_conflict_on_lock():
            result = await self.session.execute(
                update(_tickets).where(*where).values(**values).returning(*_tickets.c)
            )
        row = result.first()
        return self._row_to_entity(row._mapping) if row else None

    @Logger.io
    async def create(self, *, ticket: Ticket) -> Ticket:
        result = await self.session.execute(
            insert(_tickets)
            .values(
                id=ticket.id,
                title=ticket.title,
                origin=ticket.origin,
                destination=ticket.destination,
                transport_type=ticket.transport_type,
                price=ticket.price,
                quantity=ticket.quantity,
                departure_at=ticket.departure_at,
                perks=list(ticket.perks),
                image_url=ticket.image_url,
                vendor_email=ticket.vendor_email,
                verification_status=ticket.verification_status.value,
                is_advertised=ticket.is_advertised,
                is_hidden=ticket.is_hidden,
                created_at=ticket.created_at,
                updated_at=ticket.updated_at,
            )
            .returning(*_tickets.c)
        )
        return self._row_to_entity(result.one()._mapping)

    @Logger.io
    async def get_by_id(self, *, ticket_id: str) -> Ticket | None:
        result = await self.session.execute(select(_tickets).where(_tickets.c.id == ticket_id))
        row = result.first()
        return self._row_to_entity(row._mapping) if row else None

    @Logger.io
    async def list_by_vendor(self, *, vendor_email: str) -> List[Ticket]:
        return await self.list_by_query(query=TicketQuery(vendor_email=vendor_email))

    @Logger.io
    async def list_by_query(self, *, query: TicketQuery) -> List[Ticket]:
        stmt = select(_tickets)
        if query.verification_status is not None:
            stmt = stmt.where(_tickets.c.verification_status == query.verification_status.value)
        if query.is_hidden is not None:
            stmt = stmt.where(_tickets.c.is_hidden == query.is_hidden)
        if query.is_advertised is not None:
            stmt = stmt.where(_tickets.c.is_advertised == query.is_advertised)
        if query.vendor_email is not None:
            stmt = stmt.where(_tickets.c.vendor_email == query.vendor_email)

        result = await self.session.execute(stmt.order_by(_tickets.c.created_at.desc()))
        return [self._row_to_entity(row._mapping) for row in result]

    @Logger.io
    async def update_fields(self, *, ticket_id: str, fields: Mapping[str, Any]) -> Ticket | None:
        values = {
            name: (value.value if isinstance(value, VerificationStatus) else value)
            for name, value in fields.items()
        }
        return await self._update_returning(_tickets.c.id == ticket_id, **values)

    @Logger.io
    async def delete(self, *, ticket_id: str) -> bool:
        async with raise_conflict_on_lock():
            result = await self.session.execute(delete(_tickets).where(_tickets.c.id == ticket_id))
        return result.rowcount > 0

    @Logger.io
    async def decrement_quantity_if_available(self, *, ticket_id: str, amount: int) -> Ticket | None:
        return await self._update_returning(
            _tickets.c.id == ticket_id,
            _tickets.c.verification_status == VerificationStatus.APPROVED.value,
            _tickets.c.is_hidden == false(),
            _tickets.c.quantity >= amount,
            quantity=_tickets.c.quantity - amount,
            updated_at=datetime.now(timezone.utc),
        )

    @Logger.io
    async def hide_all_for_vendor(self, *, vendor_email: str) -> int:
        async with raise_conflict_on_lock():
            result = await self.session.execute(
                update(_tickets)
                .where(_tickets.c.vendor_email == vendor_email)
                .values(is_hidden=True, updated_at=datetime.now(timezone.utc))
            )
        return result.rowcount

    @Logger.io
    async def count_advertised(self) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(_tickets).where(_tickets.c.is_advertised == true())
        )
        return result.scalar_one()

    @Logger.io
    async def advertise_if_slot_available(self, *, ticket_id: str, max_slots: int) -> Ticket | None:
        ticket = await self._update_returning(
            _tickets.c.id == ticket_id,
            _tickets.c.is_advertised == false(),
            is_advertised=True,
            updated_at=datetime.now(timezone.utc),
        )
        if ticket is None:
            existing = await self.get_by_id(ticket_id=ticket_id)
            if existing is None:
                raise NotFoundError('Ticket not found')
            return existing

        async with raise_conflict_on_lock():
            claimed = await self.session.execute(
                update(_slots)
                .where(_slots.c.id == ADVERTISEMENT_SLOT_ROW_ID, _slots.c.used < max_slots)
                .values(used=_slots.c.used + 1)
            )
        if claimed.rowcount == 0:
            return None
        return ticket

    @Logger.io
    async def withdraw_advertisement(self, *, ticket_id: str) -> Ticket | None:
        ticket = await self._update_returning(
            _tickets.c.id == ticket_id,
            _tickets.c.is_advertised == true(),
            is_advertised=False,
            updated_at=datetime.now(timezone.utc),
        )
        if ticket is None:
            return await self.get_by_id(ticket_id=ticket_id)

        async with raise_conflict_on_lock():
            await self.session.execute(
                update(_slots)
                .where(_slots.c.id == ADVERTISEMENT_SLOT_ROW_ID, _slots.c.used > 0)
                .values(used=_slots.c.used - 1)
            )
        return ticket


async def sync_advertisement_slots(session: AsyncSession) -> int:
    """
    Create the slot counter row, or realign it with the advertised tickets.

    Run once at startup, before requests are served.
    """
    advertised = await TicketRepoImpl(session=session).count_advertised()

    updated = await session.execute(
        update(_slots).where(_slots.c.id == ADVERTISEMENT_SLOT_ROW_ID).values(used=advertised)
    )
    if updated.rowcount == 0:
        await session.execute(insert(_slots).values(id=ADVERTISEMENT_SLOT_ROW_ID, used=advertised))
    await session.commit()

    Logger.base.info(f'📣 [ADVERTISE] Slot counter synced, {advertised} in use')
    return advertised
