"""
Unit tests for the platform layer

Test Focus:
1. Bearer tokens round-trip the identity and reject tampering or missing roles
2. Driver lock errors become ConflictError, anything else passes through
3. Every domain error maps to its HTTP status
"""

import json
from unittest.mock import MagicMock

import jwt
import pytest
from sqlalchemy.exc import DBAPIError

from src.platform.database.db_conflict import is_lock_conflict, raise_conflict_on_lock
from src.platform.exception.exception_handlers import (
    cascade_incomplete_handler,
    conflict_error_handler,
    custom_error_handler,
    general_500_exception_handler,
)
from src.platform.exception.exceptions import (
    AuthenticationError,
    CascadeIncompleteError,
    ConflictError,
    DeparturePassedError,
    ForbiddenError,
    InsufficientInventoryError,
    InvalidStatusError,
    InvalidTargetError,
    InvalidTransitionError,
    NotFoundError,
    SlotsExhaustedError,
    ValidationError,
)
from src.service.marketplace.domain.entity.user_entity import UserEntity, UserRole
from src.service.marketplace.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


class _DriverError(Exception):
    def __init__(self, message: str, sqlstate: str | None = None) -> None:
        super().__init__(message)
        self.sqlstate = sqlstate


def _dbapi_error(message: str, sqlstate: str | None = None) -> DBAPIError:
    return DBAPIError('UPDATE ticket ...', {}, _DriverError(message, sqlstate))


@pytest.mark.unit
class TestJwtAuth:
    def test_round_trip(self):
        auth = JwtAuth()
        token = auth.create_jwt_token(UserEntity(email='v@example.com', role=UserRole.VENDOR))

        identity = auth.get_identity_from_jwt(token)

        assert identity.email == 'v@example.com'
        assert identity.role == UserRole.VENDOR

    def test_missing_token(self):
        with pytest.raises(AuthenticationError, match='Not authenticated'):
            JwtAuth().get_identity_from_jwt(None)

    def test_token_signed_with_another_key(self):
        forged = jwt.encode({'email': 'a@example.com', 'role': 'ADMIN'}, 'another-key', 'HS256')

        with pytest.raises(AuthenticationError, match='Invalid token'):
            JwtAuth().get_identity_from_jwt(forged)

    def test_token_with_unknown_role(self):
        auth = JwtAuth()
        token = jwt.encode(
            {'email': 'a@example.com', 'role': 'ROOT'}, auth.secret, algorithm=auth.algorithm
        )

        with pytest.raises(AuthenticationError, match='Invalid token'):
            auth.get_identity_from_jwt(token)


@pytest.mark.unit
class TestLockConflict:
    @pytest.mark.parametrize('sqlstate', ['40001', '40P01', '55P03'])
    def test_postgres_lock_states(self, sqlstate):
        assert is_lock_conflict(_dbapi_error('could not serialize access', sqlstate)) is True

    def test_sqlite_busy(self):
        assert is_lock_conflict(_dbapi_error('database is locked')) is True

    def test_other_errors(self):
        assert is_lock_conflict(_dbapi_error('syntax error', '42601')) is False

    @pytest.mark.asyncio
    async def test_lock_error_becomes_conflict(self):
        with pytest.raises(ConflictError) as exc_info:
            async with raise_conflict_on_lock('busy'):
                raise _dbapi_error('database is locked')

        assert exc_info.value.message == 'busy'
        assert isinstance(exc_info.value.__cause__, DBAPIError)

    @pytest.mark.asyncio
    async def test_other_errors_pass_through(self):
        with pytest.raises(DBAPIError):
            async with raise_conflict_on_lock():
                raise _dbapi_error('syntax error', '42601')


@pytest.mark.unit
class TestExceptionHandlers:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'error, status_code',
        [
            (ValidationError('bad'), 400),
            (InvalidStatusError('bad status'), 400),
            (InvalidTargetError('not a vendor'), 400),
            (DeparturePassedError('too late'), 400),
            (AuthenticationError('who are you'), 401),
            (ForbiddenError('no'), 403),
            (NotFoundError('gone'), 404),
            (InvalidTransitionError('already paid'), 409),
            (InsufficientInventoryError('sold out'), 409),
            (SlotsExhaustedError('full'), 409),
            (ConflictError('retry'), 409),
            (CascadeIncompleteError('half done'), 500),
        ],
    )
    async def test_status_mapping(self, error, status_code):
        response = await custom_error_handler(MagicMock(), error)

        assert response.status_code == status_code
        assert json.loads(response.body) == {'detail': error.message}

    @pytest.mark.asyncio
    async def test_unexpected_error_hides_details(self):
        response = await general_500_exception_handler(MagicMock(), RuntimeError('db password'))

        assert response.status_code == 500
        assert json.loads(response.body) == {'detail': 'Internal server error'}

    @pytest.mark.asyncio
    async def test_conflict_invites_a_retry(self):
        response = await conflict_error_handler(MagicMock(), ConflictError('retry'))

        assert response.status_code == 409
        assert response.headers['Retry-After'] == '1'

    @pytest.mark.asyncio
    async def test_incomplete_cascade_keeps_its_message(self):
        response = await cascade_incomplete_handler(MagicMock(), CascadeIncompleteError('undone'))

        assert response.status_code == 500
        assert json.loads(response.body) == {'detail': 'undone'}
