from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.database.db_conflict import raise_conflict_on_lock
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_booking_repo import IBookingRepo
from src.service.marketplace.domain.entity.booking_entity import Booking, BookingStatus
from src.service.marketplace.domain.entity.ticket_entity import as_utc
from src.service.marketplace.driven_adapter.model.booking_model import BookingModel


_bookings = BookingModel.__table__


class BookingRepoImpl(IBookingRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _row_to_entity(row: Mapping[str, Any]) -> Booking:
        """Convert a booking row to Booking entity"""
        return Booking(
            id=row['id'],
            ticket_id=row['ticket_id'],
            user_email=row['user_email'],
            vendor_email=row['vendor_email'],
            quantity=row['quantity'],
            unit_price=row['unit_price'],
            total_price=row['total_price'],
            ticket_title=row['ticket_title'],
            ticket_image_url=row['ticket_image_url'],
            origin=row['origin'],
            destination=row['destination'],
            departure_at=as_utc(row['departure_at']),
            status=BookingStatus(row['status']),
            created_at=as_utc(row['created_at']) if row['created_at'] else None,
            updated_at=as_utc(row['updated_at']) if row['updated_at'] else None,
            paid_at=as_utc(row['paid_at']) if row['paid_at'] else None,
        )

    async def _list_where(self, *where: Any) -> List[Booking]:
        result = await self.session.execute(
            select(_bookings).where(*where).order_by(_bookings.c.created_at.desc())
        )
        return [self._row_to_entity(row._mapping) for row in result]

    @Logger.io
    async def create(self, *, booking: Booking) -> Booking:
        result = await self.session.execute(
            insert(_bookings)
            .values(
                id=booking.id,
                ticket_id=booking.ticket_id,
                user_email=booking.user_email,
                vendor_email=booking.vendor_email,
                quantity=booking.quantity,
                unit_price=booking.unit_price,
                total_price=booking.total_price,
                ticket_title=booking.ticket_title,
                ticket_image_url=booking.ticket_image_url,
                origin=booking.origin,
                destination=booking.destination,
                departure_at=booking.departure_at,
                status=booking.status.value,
                created_at=booking.created_at,
                updated_at=booking.updated_at,
                paid_at=booking.paid_at,
            )
            .returning(*_bookings.c)
        )
        return self._row_to_entity(result.one()._mapping)

    @Logger.io
    async def get_by_id(self, *, booking_id: str) -> Booking | None:
        result = await self.session.execute(select(_bookings).where(_bookings.c.id == booking_id))
        row = result.first()
        return self._row_to_entity(row._mapping) if row else None

    @Logger.io
    async def list_by_user(self, *, user_email: str) -> List[Booking]:
        return await self._list_where(_bookings.c.user_email == user_email)

    @Logger.io
    async def list_by_vendor(self, *, vendor_email: str) -> List[Booking]:
        return await self._list_where(_bookings.c.vendor_email == vendor_email)

    @Logger.io
    async def update_status_if(
        self, *, booking: Booking, expected_statuses: Iterable[BookingStatus]
    ) -> Booking | None:
        expected = [status.value for status in expected_statuses]
        async with raise_conflict_on_lock():
            result = await self.session.execute(
                update(_bookings)
                .where(_bookings.c.id == booking.id, _bookings.c.status.in_(expected))
                .values(
                    status=booking.status.value,
                    paid_at=booking.paid_at,
                    updated_at=booking.updated_at or datetime.now(timezone.utc),
                )
                .returning(*_bookings.c)
            )
        row = result.first()
        return self._row_to_entity(row._mapping) if row else None
