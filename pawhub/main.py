"""Application entry point for the FastAPI backend."""
from __future__ import annotations

import asyncio
import logging
import os
from datetime import timedelta
from typing import Iterable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .database import create_session, init_db
from .routers import (
    admin_router,
    auth_router,
    clinics_router,
    commerce_router,
    follows_router,
    notifications_router,
    pets_router,
    posts_router,
    realtime_router,
    stories_router,
)
from .services import CleanupError, run_cleanup

logger = logging.getLogger(__name__)

settings = get_settings()
APP_NAME = settings.app_name
API_VERSION = settings.api_version
DISABLE_CLEANUP = os.getenv("DISABLE_CLEANUP", "").lower() == "true" or os.getenv("PYTEST_CURRENT_TEST") is not None

app = FastAPI(title=APP_NAME, version=API_VERSION)

cors_origins = os.getenv("CORS_ORIGINS")
if cors_origins:
    origins: Iterable[str] = [origin.strip() for origin in cors_origins.split(",") if origin.strip()]
else:
    origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(pets_router)
app.include_router(follows_router)
app.include_router(posts_router)
app.include_router(stories_router)
app.include_router(notifications_router)
app.include_router(commerce_router)
app.include_router(clinics_router)
app.include_router(admin_router)
app.include_router(realtime_router)

_CLEANUP_INTERVAL = timedelta(hours=24)
_NOTIFICATION_RETENTION = timedelta(days=settings.notification_retention_days)
_cleanup_task: asyncio.Task[None] | None = None
_cleanup_stop = asyncio.Event()


async def _run_cleanup_once() -> None:
    """Execute a single cleanup pass in a worker thread."""

    try:
        await asyncio.to_thread(run_cleanup, create_session, notification_retention=_NOTIFICATION_RETENTION)
    except CleanupError:
        logger.exception("Scheduled cleanup failed")


async def _cleanup_loop() -> None:
    """Background task that runs cleanup on a fixed interval."""

    while not _cleanup_stop.is_set():
        await _run_cleanup_once()
        try:
            await asyncio.wait_for(_cleanup_stop.wait(), timeout=_CLEANUP_INTERVAL.total_seconds())
        except asyncio.TimeoutError:
            continue


@app.on_event("startup")
async def _startup() -> None:
    """Ensure database schema and background tasks are ready before serving."""

    try:
        init_db()
    except Exception:
        logger.exception("Database initialisation failed")
        raise

    logger.info("%s %s serving at %s", APP_NAME, API_VERSION, settings.public_base_url)

    if DISABLE_CLEANUP:
        logger.info("Background cleanup disabled (testing mode)")
        return

    global _cleanup_task
    if _cleanup_task is None or _cleanup_task.done():
        _cleanup_stop.clear()
        _cleanup_task = asyncio.create_task(_cleanup_loop())


@app.on_event("shutdown")
async def _shutdown() -> None:
    """Stop background tasks cleanly during application shutdown."""

    if DISABLE_CLEANUP:
        return

    _cleanup_stop.set()
    if _cleanup_task is not None:
        await _cleanup_task


@app.get("/api", tags=["system"])
def api_info() -> dict[str, str]:
    return {"service": APP_NAME, "version": API_VERSION}


@app.get("/health", tags=["system"])
async def healthcheck() -> dict[str, str]:
    return {"status": "ok", "public_base_url": settings.public_base_url}
