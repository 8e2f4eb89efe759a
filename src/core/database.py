"""
Database connection and session management.

This module provides async database session management using SQLAlchemy 2.0.
PostgreSQL (asyncpg) is the deployment target; SQLite (aiosqlite) is accepted
for local runs and tests, in which case pool settings are not applied.
"""

import logging
from collections.abc import AsyncGenerator
from typing import Any

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import AsyncAdaptedQueuePool

from src.core.config import settings
from src.exceptions import DatabaseUnavailableError

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Database Engine Configuration
# -----------------------------------------------------------------------------


def create_database_engine(database_url: str | None = None) -> AsyncEngine:
    """
    Create async database engine with connection pooling.

    Args:
        database_url: Database URL. If None, uses settings.database_url

    Returns:
        Configured AsyncEngine instance

    Connection Pool Configuration (PostgreSQL only):
        - pool_size: Number of permanent connections (default: 5)
        - max_overflow: Additional connections under load (default: 10)
        - pool_pre_ping: Test connection before use (default: True)
        - pool_recycle: Recycle connections after N seconds (default: 3600)
    """
    url = database_url or settings.database_url

    logger.info("Initializing database engine...")

    if url.startswith("sqlite"):
        engine = create_async_engine(url, echo=settings.debug)
        logger.info("Database engine created for SQLite (no pooling)")
        return engine

    engine = create_async_engine(
        url,
        echo=settings.debug,
        echo_pool=settings.debug,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        pool_recycle=settings.db_pool_recycle,
        poolclass=AsyncAdaptedQueuePool,
        pool_timeout=settings.db_pool_timeout,
        connect_args={
            "server_settings": {
                "application_name": f"{settings.app_name} - {settings.environment}",
            },
        },
    )

    logger.info(
        f"Database engine created: pool_size={settings.db_pool_size}, "
        f"max_overflow={settings.db_max_overflow}"
    )

    return engine


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Build the session factory stored on ``app.state``."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# -----------------------------------------------------------------------------
# Session Dependency
# -----------------------------------------------------------------------------


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield one session per request from the application's sessionmaker.

    Services commit their own unit of work; anything left uncommitted when
    the request fails is rolled back here.

    Args:
        request: Incoming request (gives access to ``app.state``)

    Yields:
        AsyncSession bound to the application engine
    """
    sessionmaker = request.app.state.sessionmaker
    async with sessionmaker() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def check_database_connection(
    sessionmaker: async_sessionmaker[AsyncSession] | None,
) -> bool:
    """
    Run ``SELECT 1`` to verify connectivity.

    Returns:
        True when the database answered, False otherwise
    """
    if sessionmaker is None:
        return False
    try:
        async with sessionmaker() as session:
            await session.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False


# -----------------------------------------------------------------------------
# Error Translation
# -----------------------------------------------------------------------------

_HOST_RESOLUTION_MARKERS = (
    "name or service not known",
    "nodename nor servname",
    "getaddrinfo",
    "temporary failure in name resolution",
    "could not translate host name",
)

_AUTH_FAILURE_MARKERS = (
    "password authentication failed",
    "authentication failed",
    "invalidpassworderror",
    "invalidauthorizationspecification",
)


def is_connectivity_error(exc: BaseException) -> bool:
    """True for driver errors that mean the database could not be reached."""
    if isinstance(exc, (OperationalError, InterfaceError)):
        return True
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return True
    return isinstance(exc, (ConnectionError, OSError))


def translate_database_error(exc: BaseException) -> DatabaseUnavailableError:
    """
    Map a low-level connectivity failure to a client-safe 503 error.

    Three cases are distinguished: the host name does not resolve, the
    server rejected our credentials, or the server is otherwise unreachable.
    The raw driver message is logged, never returned.

    Args:
        exc: Exception raised by the driver or SQLAlchemy

    Returns:
        DatabaseUnavailableError with a translated message
    """
    raw = f"{type(exc).__name__}: {exc}"
    orig: Any = getattr(exc, "orig", None)
    if orig is not None:
        raw = f"{raw} {type(orig).__name__}: {orig}"
    lowered = raw.lower()

    logger.error(f"Database connectivity error: {raw}")

    if any(marker in lowered for marker in _HOST_RESOLUTION_MARKERS):
        return DatabaseUnavailableError(
            message="Database host could not be resolved. Check DATABASE_URL.",
            details={"reason": "host_resolution"},
        )
    if any(marker in lowered for marker in _AUTH_FAILURE_MARKERS):
        return DatabaseUnavailableError(
            message="Database authentication failed. Check database credentials.",
            details={"reason": "authentication"},
        )
    return DatabaseUnavailableError(details={"reason": "unreachable"})


# -----------------------------------------------------------------------------
# Lifecycle Management
# -----------------------------------------------------------------------------


async def close_database_connection(engine: AsyncEngine) -> None:
    """
    Close database engine and dispose of connection pool.

    Args:
        engine: The AsyncEngine to dispose
    """
    try:
        await engine.dispose()
        logger.info("Database engine disposed successfully")
    except Exception as e:
        logger.error(f"Error disposing database engine: {e}")
