"""
Relational session management.

A session is one checked-out pool connection. Whoever acquires a session owns it
and is the only one allowed to close it: acquire_session() hands back an explicit
ownership flag so release logic never has to guess from None checks.
"""

from contextlib import contextmanager
from typing import Any, Iterator, Optional, Protocol, Tuple

from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import QueuePool

from catalog.constants import ERRORS
from catalog.handlers.models.env_vars import CatalogEnvVars
from catalog.handlers.utils.errors import InfrastructureError
from catalog.handlers.utils.observability import count, logger


class SessionPool(Protocol):
    """Anything that hands out connections, a SQLAlchemy Engine in production."""

    def connect(self) -> Any:
        ...


def create_pool(settings: CatalogEnvVars) -> Engine:
    """
    Create the process-wide connection pool. No connection is opened here.

    Args:
        settings: Parsed environment variables

    Returns:
        SQLAlchemy engine backed by a QueuePool
    """
    if settings.DATABASE_URL:
        logger.info('Creating connection pool from DATABASE_URL')
        return create_engine(settings.DATABASE_URL, pool_pre_ping=True)

    logger.info('Creating Oracle connection pool', extra={
        'offline': settings.IS_OFFLINE,
        'pool_min': settings.DB_POOL_MIN,
        'pool_max': settings.DB_POOL_MAX,
    })
    return create_engine(
        'oracle+oracledb://@',
        connect_args={
            'user': settings.ORACLE_USER,
            'password': settings.ORACLE_PASSWORD,
            'dsn': settings.connect_string,
        },
        poolclass=QueuePool,
        pool_size=settings.DB_POOL_MIN,
        max_overflow=max(settings.DB_POOL_MAX - settings.DB_POOL_MIN, 0),
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE_SECONDS,
        pool_pre_ping=True,
    )


def acquire_session(pool: SessionPool, session: Optional[Connection] = None) -> Tuple[Connection, bool]:
    """
    Return a usable session and whether the caller owns it.

    An injected session is reused and stays owned by whoever injected it.
    Otherwise a new one is checked out of the pool and the caller must release it.

    Raises:
        InfrastructureError: If no connection could be acquired
    """
    if session is not None:
        return session, False

    logger.debug('Acquiring database session')
    try:
        return pool.connect(), True
    except SQLAlchemyError as exc:
        logger.error('Failed to acquire database session', extra={'error': str(exc)})
        raise InfrastructureError(ERRORS['DB_UNAVAILABLE']) from exc


def release_session(session: Optional[Connection], owns: bool) -> None:
    """Close the session if the caller owns it. Close failures are logged, never raised."""
    if session is None or not owns:
        return

    try:
        session.close()
        logger.debug('Database session released')
    except Exception as exc:
        count('SessionReleaseFailure')
        logger.warning('Error closing database session', extra={'error': str(exc)})


@contextmanager
def session_scope(pool: SessionPool, session: Optional[Connection] = None) -> Iterator[Connection]:
    """Acquire a session for the block and release it on every exit path if owned."""
    active, owns = acquire_session(pool, session)
    try:
        yield active
    finally:
        release_session(active, owns)
