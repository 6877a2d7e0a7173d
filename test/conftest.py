"""
Test Configuration and Fixtures

This module provides:
- Environment setup that must happen before application modules are imported
- Caller identities for every role
- Ticket/booking builders
- An in-memory unit of work whose repositories are AsyncMocks
- A TestClient over the real app, backed by a per-test SQLite file

Architecture:
- Unit tests (test/**/unit/): use `uow` and drive use cases without a database
- Integration tests (test/**/integration/): own conftest with a temporary SQLite database
- API tests: `client` + `auth_headers`
"""

# =============================================================================
# Environment setup MUST happen before any other imports
# (settings and the loguru sinks are configured at import time)
# =============================================================================
import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)
    os.environ.setdefault('SECRET_KEY', 'test-secret-key-with-enough-length-for-hs256')


_early_setup_test_environment()

from collections.abc import AsyncIterator, Iterator  # noqa: E402
from contextlib import asynccontextmanager  # noqa: E402
from datetime import datetime, timedelta, timezone  # noqa: E402
from typing import Any, Callable  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402

from dependency_injector import providers  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402

from src.platform.app_factory import create_app  # noqa: E402
from src.platform.config.di import container  # noqa: E402
from src.platform.config.wire_modules import WIRE_MODULES  # noqa: E402
from src.platform.database.orm_db_setting import Database  # noqa: E402
from src.platform.logging.loguru_io import Logger  # noqa: E402
from src.service.marketplace.app.interface.i_booking_repo import IBookingRepo  # noqa: E402
from src.service.marketplace.app.interface.i_ticket_repo import ITicketRepo  # noqa: E402
from src.service.marketplace.app.interface.i_unit_of_work import AbstractUnitOfWork  # noqa: E402
from src.service.marketplace.app.interface.i_user_repo import IUserRepo  # noqa: E402
from src.service.marketplace.domain.entity.booking_entity import Booking  # noqa: E402
from src.service.marketplace.domain.entity.ticket_entity import (  # noqa: E402
    Ticket,
    VerificationStatus,
)
from src.service.marketplace.domain.entity.user_entity import UserEntity, UserRole  # noqa: E402
from src.service.marketplace.domain.value_object.identity import Identity  # noqa: E402
from src.service.marketplace.driven_adapter.repo.ticket_repo_impl import (  # noqa: E402
    sync_advertisement_slots,
)
from src.service.marketplace.driving_adapter.http_controller.auth.jwt_auth import (  # noqa: E402
    JwtAuth,
)


USER_EMAIL = 'user@example.com'
OTHER_USER_EMAIL = 'other.user@example.com'
VENDOR_EMAIL = 'vendor@example.com'
OTHER_VENDOR_EMAIL = 'other.vendor@example.com'
ADMIN_EMAIL = 'admin@example.com'


class InMemoryUnitOfWork(AbstractUnitOfWork):
    """Unit of work over AsyncMock repositories; records commits and rollbacks."""

    def __init__(self) -> None:
        self.user_repo = AsyncMock(spec=IUserRepo)
        self.ticket_repo = AsyncMock(spec=ITicketRepo)
        self.booking_repo = AsyncMock(spec=IBookingRepo)
        self.committed = 0
        self.rolled_back = 0

    async def _commit(self) -> None:
        self.committed += 1

    async def rollback(self) -> None:
        self.rolled_back += 1


# =============================================================================
# Identities
# =============================================================================
@pytest.fixture
def user_identity() -> Identity:
    return Identity(email=USER_EMAIL, role=UserRole.USER)


@pytest.fixture
def other_user_identity() -> Identity:
    return Identity(email=OTHER_USER_EMAIL, role=UserRole.USER)


@pytest.fixture
def vendor_identity() -> Identity:
    return Identity(email=VENDOR_EMAIL, role=UserRole.VENDOR)


@pytest.fixture
def other_vendor_identity() -> Identity:
    return Identity(email=OTHER_VENDOR_EMAIL, role=UserRole.VENDOR)


@pytest.fixture
def admin_identity() -> Identity:
    return Identity(email=ADMIN_EMAIL, role=UserRole.ADMIN)


# =============================================================================
# Builders
# =============================================================================
@pytest.fixture
def future_departure() -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=7)


@pytest.fixture
def past_departure() -> datetime:
    return datetime.now(timezone.utc) - timedelta(hours=1)


@pytest.fixture
def make_ticket(future_departure: datetime) -> Callable[..., Ticket]:
    """Build a persisted-looking ticket; keyword overrides win."""

    def _make(**overrides: Any) -> Ticket:
        ticket = Ticket.create(
            vendor_email=overrides.pop('vendor_email', VENDOR_EMAIL),
            title=overrides.pop('title', 'Dhaka to Chittagong Express'),
            origin=overrides.pop('origin', 'Dhaka'),
            destination=overrides.pop('destination', 'Chittagong'),
            transport_type=overrides.pop('transport_type', 'bus'),
            price=overrides.pop('price', 25.0),
            quantity=overrides.pop('quantity', 10),
            departure_at=overrides.pop('departure_at', future_departure),
            perks=overrides.pop('perks', ['AC']),
        )
        for field, value in overrides.items():
            setattr(ticket, field, value)
        return ticket

    return _make


@pytest.fixture
def approved_ticket(make_ticket: Callable[..., Ticket]) -> Ticket:
    return make_ticket(verification_status=VerificationStatus.APPROVED)


@pytest.fixture
def make_booking(make_ticket: Callable[..., Ticket]) -> Callable[..., Booking]:
    def _make(*, quantity: int = 2, ticket: Ticket | None = None, **overrides: Any) -> Booking:
        booking = Booking.reserve(
            ticket=ticket or make_ticket(), user_email=USER_EMAIL, quantity=quantity
        )
        for field, value in overrides.items():
            setattr(booking, field, value)
        return booking

    return _make


@pytest.fixture
def uow() -> InMemoryUnitOfWork:
    return InMemoryUnitOfWork()


# =============================================================================
# HTTP client (SQLite-backed test app)
# =============================================================================
@asynccontextmanager
async def lifespan_for_tests(app: FastAPI) -> AsyncIterator[None]:
    """Same startup as production, minus the server: DI wiring, tables, slot counter."""
    Logger.base.info('🧪 [Test App] Starting up...')

    container.wire(modules=WIRE_MODULES)
    database = container.database()
    await database.create_tables()

    session = database.new_session()
    try:
        await sync_advertisement_slots(session)
    finally:
        await session.close()

    yield

    await database.dispose()
    container.unwire()
    Logger.base.info('👋 [Test App] Shutdown complete')


@pytest.fixture
def client(tmp_path: Path) -> Iterator[TestClient]:
    container.database.override(
        providers.Singleton(Database, url=f'sqlite+aiosqlite:///{tmp_path / "api.db"}')
    )
    app = create_app(lifespan=lifespan_for_tests, title_suffix=' (Test)')
    try:
        with TestClient(app, raise_server_exceptions=False) as test_client:
            yield test_client
    finally:
        container.database.reset_override()


@pytest.fixture
def auth_headers() -> Callable[[Identity], dict[str, str]]:
    """Bearer header for any identity; tokens are stateless, no stored user needed."""

    def _headers(identity: Identity) -> dict[str, str]:
        token = JwtAuth().create_jwt_token(UserEntity(email=identity.email, role=identity.role))
        return {'Authorization': f'Bearer {token}'}

    return _headers
