"""FastAPI application entry point.

Wiring only: lifespan, exception handlers, middleware, routers and the
process-wide components kept on app.state (challenge store, notifier,
notification dispatcher, email template renderer). No business logic here.
See course_advising.core.lifespan and course_advising.core.exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and optionally
clear get_settings cache) before importing or calling create_app().
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from course_advising.api.v1 import api_router
from course_advising.core.config import get_settings
from course_advising.core.exception_handlers import register_exception_handlers
from course_advising.core.lifespan import create_lifespan
from course_advising.core.limiter import limiter
from course_advising.infrastructure.cache.challenge_store import InMemoryChallengeStore
from course_advising.infrastructure.services import (
    EmailTemplateRenderer,
    NotificationDispatcher,
    build_notifier,
)
from course_advising.middleware import RequestIDMiddleware, TimeoutMiddleware
from course_advising.shared.telemetry.logging import setup_logging


def create_app() -> FastAPI:
    """Build and return the FastAPI application. Settings are resolved here (deferred from import)."""
    settings = get_settings()
    setup_logging()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )

    limiter.enabled = settings.rate_limit_enabled
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    register_exception_handlers(app)

    # The lifespan swaps in a Redis store when CHALLENGE_STORE_BACKEND=redis and Redis answers.
    app.state.challenge_store = InMemoryChallengeStore()
    app.state.notifier = build_notifier(settings)
    app.state.notification_dispatcher = NotificationDispatcher()
    app.state.template_renderer = EmailTemplateRenderer()

    # Middleware: first added = outermost. Order: timeout → request ID → CORS.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware, header_name=settings.request_id_header)
    app.add_middleware(TimeoutMiddleware, timeout_seconds=settings.request_timeout_seconds)

    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()
