"""Application lifespan: startup and shutdown.

Single place for startup/shutdown wiring (no business logic): logging,
record store construction, and release of the SQL engine / Redis pool.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from cms.core.config import get_settings
from cms.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup: logging, record store (unless one was injected on app.state).
    Shutdown: Redis client close, SQL engine dispose.
    """
    settings = get_settings()
    setup_logging()

    if getattr(app.state, "record_store", None) is None:
        from cms.infrastructure.record_store_factory import RecordStoreFactory

        app.state.record_store = RecordStoreFactory.create_record_store(settings)
    logger.info(
        "%s started with %d collection(s), backend=%s",
        settings.app_name,
        len(app.state.registry),
        settings.record_backend,
    )

    yield

    store = getattr(app.state, "record_store", None)
    client = getattr(store, "redis", None)
    if client is not None:
        await client.aclose()
        logger.info("Redis record store closed")

    from cms.infrastructure.persistence import database

    await database.dispose_engine()
