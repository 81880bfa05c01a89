"""Pytest configuration and fixtures for course_advising.

Environment is set before the application is imported: a throwaway SQLite
database (aiosqlite), a test secret, rate limiting off and no SMTP. Each
test that needs the database gets its own file with freshly created
tables; each HTTP test gets a fresh in-memory challenge store, a recording
notifier and a new notification dispatcher on app.state.
"""

import os
import re
import tempfile
from collections.abc import Awaitable, Callable
from pathlib import Path

_BOOTSTRAP_DIR = Path(tempfile.mkdtemp(prefix="course-advising-tests-"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_BOOTSTRAP_DIR / 'bootstrap.db'}"
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "test"
os.environ["SMTP_HOST"] = ""
os.environ["CHALLENGE_STORE_BACKEND"] = "memory"
os.environ["REDIS_ENABLED"] = "false"

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from course_advising.application.dtos.user import UserResult  # noqa: E402
from course_advising.core.config import get_settings  # noqa: E402
from course_advising.infrastructure.cache.challenge_store import (  # noqa: E402
    InMemoryChallengeStore,
)
from course_advising.infrastructure.persistence import database as db  # noqa: E402
from course_advising.infrastructure.persistence.repositories import (  # noqa: E402
    UserRepository,
)
from course_advising.infrastructure.services import NotificationDispatcher  # noqa: E402
from course_advising.main import app  # noqa: E402
from course_advising.shared.utils.generators import generate_token  # noqa: E402
from tests.fakes import RecordingNotifier  # noqa: E402

DEFAULT_PASSWORD = "CorrectHorse42!"

_CODE_RE = re.compile(r"<strong>(\d{6})</strong>")
_TOKEN_RE = re.compile(r"token=([0-9a-f]+)")


def code_from(body: str) -> str:
    """Extract the six-digit login code from a rendered two-factor email."""
    match = _CODE_RE.search(body)
    assert match, f"no code in email body: {body!r}"
    return match.group(1)


def token_from(body: str) -> str:
    """Extract the one-time token from a verification or reset link."""
    match = _TOKEN_RE.search(body)
    assert match, f"no token in email body: {body!r}"
    return match.group(1)


@pytest.fixture
async def database(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point the app at a per-test SQLite file and create the tables."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    get_settings.cache_clear()
    await db.dispose_engine()
    await db.create_all()
    yield
    await db.dispose_engine()
    get_settings.cache_clear()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def dispatcher() -> NotificationDispatcher:
    return NotificationDispatcher()


@pytest.fixture
async def client(
    database: None,
    notifier: RecordingNotifier,
    dispatcher: NotificationDispatcher,
) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    app.state.notifier = notifier
    app.state.notification_dispatcher = dispatcher
    app.state.challenge_store = InMemoryChallengeStore()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    await dispatcher.drain()


UserFactory = Callable[..., Awaitable[UserResult]]


@pytest.fixture
def make_user(database: None) -> UserFactory:
    """Insert a user directly through UserRepository (verified by default)."""

    async def _make(
        email: str,
        *,
        first_name: str = "Test",
        last_name: str = "User",
        password: str = DEFAULT_PASSWORD,
        is_admin: bool = False,
        is_verified: bool = True,
    ) -> UserResult:
        db._ensure_engine()
        assert db.AsyncSessionLocal is not None
        async with db.AsyncSessionLocal() as session:
            repo = UserRepository(session)
            user = await repo.create_user(
                first_name,
                last_name,
                email,
                password,
                generate_token(),
                is_admin=is_admin,
                is_verified=is_verified,
            )
            await session.commit()
            return repo.to_result(user)

    return _make
