"""
Unit of Work - one transaction shared by the repositories of a use case

Usage:
    async with uow:
        ticket = await uow.ticket_repo.decrement_quantity_if_available(...)
        booking = await uow.booking_repo.create(...)
        await uow.commit()

Leaving the block without commit() rolls every write back.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from src.service.marketplace.app.interface.i_booking_repo import IBookingRepo
    from src.service.marketplace.app.interface.i_ticket_repo import ITicketRepo
    from src.service.marketplace.app.interface.i_user_repo import IUserRepo


class AbstractUnitOfWork(abc.ABC):
    user_repo: IUserRepo
    ticket_repo: ITicketRepo
    booking_repo: IBookingRepo

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.rollback()

    async def commit(self) -> None:
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError
