"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for DB sessions and application services.
Services are built per request from infrastructure implementations here;
routes depend only on these dependencies, not on infra directly.

Process-wide components (challenge store, notifier, notification
dispatcher, template renderer) are created in create_app() and live on
app.state, so tests can swap them per application instance.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from course_advising.application.dtos.user import UserResult
from course_advising.application.interfaces.services import (
    IChallengeStore,
    INotificationDispatcher,
    INotifier,
    ITemplateRenderer,
)
from course_advising.application.services import (
    AccountService,
    AdvisingService,
    TwoFactorService,
)
from course_advising.core.config import get_settings
from course_advising.infrastructure.persistence.database import (
    get_db,
    get_db_transactional,
)
from course_advising.infrastructure.persistence.repositories import (
    AdvisingRepository,
    UserRepository,
)
from course_advising.infrastructure.security.jwt import verify_token

_http_bearer = HTTPBearer(auto_error=False)


# ---- Process-wide components (app.state) ----


def get_challenge_store(request: Request) -> IChallengeStore:
    return request.app.state.challenge_store


def get_notifier(request: Request) -> INotifier:
    return request.app.state.notifier


def get_notification_dispatcher(request: Request) -> INotificationDispatcher:
    return request.app.state.notification_dispatcher


def get_template_renderer(request: Request) -> ITemplateRenderer:
    return request.app.state.template_renderer


# ---- Repositories ----


async def get_user_repo(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserRepository:
    """User repository for read operations."""
    return UserRepository(db)


async def get_user_repo_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> UserRepository:
    """User repository for create/update/delete (transactional)."""
    return UserRepository(db)


# ---- Application services ----


def _two_factor_service(
    store: IChallengeStore,
    notifier: INotifier,
    renderer: ITemplateRenderer,
    users: UserRepository,
) -> TwoFactorService:
    settings = get_settings()
    return TwoFactorService(
        store,
        notifier,
        renderer,
        users,
        code_ttl_seconds=settings.two_factor_code_ttl_seconds,
        log_codes=not settings.is_production,
    )


async def get_two_factor_service(
    store: Annotated[IChallengeStore, Depends(get_challenge_store)],
    notifier: Annotated[INotifier, Depends(get_notifier)],
    renderer: Annotated[ITemplateRenderer, Depends(get_template_renderer)],
    users: Annotated[UserRepository, Depends(get_user_repo)],
) -> TwoFactorService:
    """Two-factor gate (verify-2fa, resend-2fa)."""
    return _two_factor_service(store, notifier, renderer, users)


def _account_service(
    user_repo: UserRepository,
    store: IChallengeStore,
    notifier: INotifier,
    renderer: ITemplateRenderer,
) -> AccountService:
    settings = get_settings()
    return AccountService(
        user_repo,
        _two_factor_service(store, notifier, renderer, user_repo),
        notifier,
        renderer,
        frontend_url=settings.frontend_url,
        backend_url=settings.backend_url,
    )


async def get_account_service(
    user_repo: Annotated[UserRepository, Depends(get_user_repo)],
    store: Annotated[IChallengeStore, Depends(get_challenge_store)],
    notifier: Annotated[INotifier, Depends(get_notifier)],
    renderer: Annotated[ITemplateRenderer, Depends(get_template_renderer)],
) -> AccountService:
    """Account service for read-only routes (login, profile reads)."""
    return _account_service(user_repo, store, notifier, renderer)


async def get_account_service_for_write(
    user_repo: Annotated[UserRepository, Depends(get_user_repo_for_write)],
    store: Annotated[IChallengeStore, Depends(get_challenge_store)],
    notifier: Annotated[INotifier, Depends(get_notifier)],
    renderer: Annotated[ITemplateRenderer, Depends(get_template_renderer)],
) -> AccountService:
    """Account service for routes that change users (transactional session)."""
    return _account_service(user_repo, store, notifier, renderer)


def _advising_service(db: AsyncSession, request: Request) -> AdvisingService:
    return AdvisingService(
        AdvisingRepository(db),
        UserRepository(db),
        get_notifier(request),
        get_template_renderer(request),
        get_notification_dispatcher(request),
    )


async def get_advising_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    request: Request,
) -> AdvisingService:
    """Advising workflow for read-only routes."""
    return _advising_service(db, request)


async def get_advising_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    request: Request,
) -> AdvisingService:
    """Advising workflow for submit, edit and review (one transactional session)."""
    return _advising_service(db, request)


# ---- Current user ----


async def get_current_user_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    user_repo: Annotated[UserRepository, Depends(get_user_repo)],
) -> UserResult | None:
    """Return current user from JWT if present; else None."""
    if not credentials:
        return None
    try:
        payload = verify_token(credentials.credentials)
        user_id = int(payload["sub"])
    except (ValueError, KeyError):
        return None
    return await user_repo.get_result(user_id)


async def get_current_user(
    current_user: Annotated[UserResult | None, Depends(get_current_user_optional)],
) -> UserResult:
    """Return current user from JWT; raise 401 if missing or invalid."""
    if current_user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return current_user
