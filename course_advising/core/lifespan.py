"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of infrastructure (database tables,
Redis-backed challenge store, notification drain, DB engine dispose).
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from course_advising.core.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: database tables (if DATABASE_AUTO_CREATE), Redis cache
    and challenge store (if CHALLENGE_STORE_BACKEND=redis). Shutdown order:
    drain background notifications, cache disconnect, SQL engine dispose.

    Components created in create_app() (challenge store, notifier,
    dispatcher) are already on app.state; a Redis store replaces the
    in-memory one only when Redis answers.
    """
    settings = get_settings()

    # ---- Startup ----
    from course_advising.infrastructure.persistence import database

    if settings.database_auto_create:
        await database.create_all()

    app.state.cache = None
    # Settings reject CHALLENGE_STORE_BACKEND=redis without REDIS_ENABLED.
    if settings.challenge_store_backend == "redis":
        from course_advising.infrastructure.cache import (
            RedisChallengeCache,
            RedisChallengeStore,
        )

        cache = RedisChallengeCache(settings=settings)
        await cache.connect()
        if cache.is_available():
            app.state.cache = cache
            app.state.challenge_store = RedisChallengeStore(cache)
            logger.info("Two-factor challenges stored in Redis")
        else:
            logger.warning(
                "Redis unavailable; two-factor challenges kept in process memory"
            )

    yield

    # ---- Shutdown ----
    dispatcher = getattr(app.state, "notification_dispatcher", None)
    if dispatcher is not None:
        await dispatcher.drain()

    if getattr(app.state, "cache", None) is not None:
        await app.state.cache.disconnect()
        app.state.cache = None

    await database.dispose_engine()
