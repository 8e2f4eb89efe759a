"""Application startup and shutdown."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.core.config import settings
from src.core.database import (
    close_database_connection,
    create_database_engine,
    create_sessionmaker,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Own the database engine for the life of the process.

    Request handlers reach the session factory through
    ``app.state.sessionmaker`` (see ``get_db``); tests install their own
    factory there instead of running this.
    """
    logger.info(f"{settings.app_name} {settings.version} starting ({settings.environment})")
    engine = create_database_engine()
    app.state.sessionmaker = create_sessionmaker(engine)

    try:
        yield
    finally:
        logger.info("Shutting down, disposing database engine")
        app.state.sessionmaker = None
        await close_database_connection(engine)
