"""
FastAPI application entrypoint for the QR access service.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from qr_access import __version__
from qr_access.api.routes import router as api_router
from qr_access.core.config import get_settings
from qr_access.core.logging import configure_logging
from qr_access.dependencies import get_token_store
from qr_access.services import ExpiredTokenReclaimer

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    logger.info("QR access service running at %s", settings.public_host)

    task: asyncio.Task | None = None
    if settings.tokens.reclaim_interval_seconds > 0:
        reclaimer = ExpiredTokenReclaimer(
            get_token_store(),
            interval_seconds=settings.tokens.reclaim_interval_seconds,
            retention_seconds=settings.tokens.retention_seconds,
        )
        task = asyncio.create_task(reclaimer.run_forever())
    try:
        yield
    finally:
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="QR Access",
        version=__version__,
        description="Issues single-use QR access codes over SMS and verifies scans.",
        lifespan=_lifespan,
    )
    app.include_router(api_router)
    return app


app = create_app()

__all__ = ["app", "create_app"]
