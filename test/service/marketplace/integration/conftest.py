"""
Integration fixtures: a throwaway SQLite database per test

Every unit of work opens its own session on the same file, so concurrent use
cases really compete for the database write lock.
"""

from datetime import datetime
from typing import Any, Awaitable, Callable

import attrs
import pytest

from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.service.marketplace.app.policy.advertisement_slot_policy import AdvertisementSlotPolicy
from src.service.marketplace.domain.entity.ticket_entity import Ticket, VerificationStatus
from src.service.marketplace.domain.entity.user_entity import UserEntity, UserRole
from src.service.marketplace.driven_adapter.repo.ticket_repo_impl import sync_advertisement_slots


@pytest.fixture
async def database(tmp_path):
    db = Database(url=f'sqlite+aiosqlite:///{tmp_path / "marketplace.db"}')
    await db.create_tables()

    session = db.new_session()
    try:
        await sync_advertisement_slots(session)
    finally:
        await session.close()

    yield db

    await db.dispose()


@pytest.fixture
def new_uow(database: Database) -> Callable[[], SqlAlchemyUnitOfWork]:
    return lambda: SqlAlchemyUnitOfWork(session_factory=database.new_session)


@pytest.fixture
def slot_policy() -> AdvertisementSlotPolicy:
    return AdvertisementSlotPolicy(max_slots=6)


@pytest.fixture
def seed_user(new_uow) -> Callable[..., Awaitable[UserEntity]]:
    async def _seed(email: str, role: UserRole = UserRole.USER) -> UserEntity:
        async with new_uow() as uow:
            user = await uow.user_repo.upsert(user=UserEntity.create(email=email))
            if role != UserRole.USER:
                user = await uow.user_repo.update_role(user_id=user.id, role=role)
            await uow.commit()
        return user

    return _seed


@pytest.fixture
def seed_ticket(
    new_uow, vendor_identity, future_departure: datetime
) -> Callable[..., Awaitable[Ticket]]:
    """Insert a ticket straight through the repository, approved unless overridden."""

    async def _seed(**overrides: Any) -> Ticket:
        ticket = Ticket.create(
            vendor_email=overrides.pop('vendor_email', vendor_identity.email),
            title=overrides.pop('title', 'Dhaka to Sylhet Night Coach'),
            origin='Dhaka',
            destination='Sylhet',
            transport_type='bus',
            price=overrides.pop('price', 12.5),
            quantity=overrides.pop('quantity', 10),
            departure_at=overrides.pop('departure_at', future_departure),
        )
        overrides.setdefault('verification_status', VerificationStatus.APPROVED)
        ticket = attrs.evolve(ticket, **overrides)
        async with new_uow() as uow:
            created = await uow.ticket_repo.create(ticket=ticket)
            await uow.commit()
        return created

    return _seed
