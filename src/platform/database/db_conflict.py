"""
Translate lock contention raised by the database driver into ConflictError

Postgres reports a lost race with a SQLSTATE (serialization failure, deadlock,
lock not available); SQLite reports it as an OperationalError "database is locked".
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import DBAPIError

from src.platform.exception.exceptions import ConflictError


LOCK_CONFLICT_SQLSTATES = frozenset({'40001', '40P01', '55P03'})


def is_lock_conflict(error: DBAPIError) -> bool:
    orig = error.orig
    sqlstate = getattr(orig, 'sqlstate', None) or getattr(orig, 'pgcode', None)
    if sqlstate in LOCK_CONFLICT_SQLSTATES:
        return True
    return 'database is locked' in str(orig).lower()


@asynccontextmanager
async def raise_conflict_on_lock(message: str = 'Concurrent update, please retry') -> AsyncIterator[None]:
    try:
        yield
    except DBAPIError as e:
        if is_lock_conflict(e):
            raise ConflictError(message) from e
        raise
