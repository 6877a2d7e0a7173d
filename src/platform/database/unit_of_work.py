"""
Unit of Work Pattern - one AsyncSession (one transaction) per `async with` block

Architecture:
- UoW opens a fresh session on enter and closes it on exit
- UoW owns commit/rollback; leaving the block without commit() rolls back
- Repositories share the UoW session, so their writes commit together
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.database.db_conflict import raise_conflict_on_lock
from src.service.marketplace.app.interface.i_unit_of_work import AbstractUnitOfWork


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """
    SQLAlchemy implementation of Unit of Work

    Usage in use case:
        async with uow:
            booking = await uow.booking_repo.create(booking=...)
            await uow.commit()
    """

    def __init__(self, session_factory: Callable[[], AsyncSession]) -> None:
        self.session_factory = session_factory
        self.session: Optional[AsyncSession] = None

    async def __aenter__(self) -> AbstractUnitOfWork:
        from src.service.marketplace.driven_adapter.repo.booking_repo_impl import (
            BookingRepoImpl,
        )
        from src.service.marketplace.driven_adapter.repo.ticket_repo_impl import TicketRepoImpl
        from src.service.marketplace.driven_adapter.repo.user_repo_impl import UserRepoImpl

        self.session = self.session_factory()

        # Create repositories with shared session
        self.user_repo = UserRepoImpl(session=self.session)
        self.ticket_repo = TicketRepoImpl(session=self.session)
        self.booking_repo = BookingRepoImpl(session=self.session)

        return await super().__aenter__()

    async def __aexit__(self, *args: Any) -> None:
        try:
            await super().__aexit__(*args)
        finally:
            if self.session is not None:
                await self.session.close()
                self.session = None

    async def _commit(self) -> None:
        assert self.session is not None, 'commit() outside of `async with uow`'
        async with raise_conflict_on_lock('Transaction lost a concurrent update, please retry'):
            await self.session.commit()

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()
