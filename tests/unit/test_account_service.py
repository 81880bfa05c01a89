"""AccountService unit tests with a mocked user repository."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from course_advising.application.dtos.user import UserResult
from course_advising.application.services import AccountService
from course_advising.domain.exceptions import (
    AccountNotVerifiedException,
    AuthenticationException,
    DependencyException,
    ResourceNotFoundException,
    ValidationException,
)
from course_advising.infrastructure.services import EmailTemplateRenderer
from tests.fakes import RaisingNotifier, RecordingNotifier


def _orm_user(*, is_verified: bool = True) -> MagicMock:
    user = MagicMock()
    user.id = 3
    user.first_name = "Ada"
    user.email = "ada@example.com"
    user.is_verified = is_verified
    return user


def _result() -> UserResult:
    return UserResult(
        id=3,
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        is_verified=True,
        is_admin=False,
    )


@pytest.fixture
def user_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.to_result = MagicMock(return_value=_result())
    return repo


@pytest.fixture
def two_factor() -> AsyncMock:
    return AsyncMock()


def _service(user_repo, two_factor, notifier) -> AccountService:
    return AccountService(
        user_repo,
        two_factor,
        notifier,
        EmailTemplateRenderer(),
        frontend_url="http://app.example.com/",
        backend_url="http://api.example.com",
    )


async def test_register_emails_verification_link(user_repo, two_factor) -> None:
    user_repo.create_user = AsyncMock(return_value=_orm_user(is_verified=False))
    notifier = RecordingNotifier()
    svc = _service(user_repo, two_factor, notifier)
    await svc.register(" Ada ", "Lovelace", "ada@example.com", "pw-123456")
    args = user_repo.create_user.await_args.args
    assert args[:4] == ("Ada", "Lovelace", "ada@example.com", "pw-123456")
    token = args[4]
    assert len(token) == 64
    user_repo.commit.assert_awaited_once()
    assert f"http://api.example.com/api/v1/auth/verify?token={token}" in notifier.sent[0].html_body


async def test_register_survives_email_failure(user_repo, two_factor) -> None:
    user_repo.create_user = AsyncMock(return_value=_orm_user(is_verified=False))
    svc = _service(user_repo, two_factor, RaisingNotifier())
    result = await svc.register("Ada", "Lovelace", "ada@example.com", "pw-123456")
    assert result.id == 3


async def test_register_requires_fields(user_repo, two_factor) -> None:
    svc = _service(user_repo, two_factor, RecordingNotifier())
    with pytest.raises(ValidationException) as exc_info:
        await svc.register("Ada", "  ", "ada@example.com", "pw")
    assert exc_info.value.details == {"field": "last_name"}
    user_repo.create_user.assert_not_awaited()


async def test_login_issues_challenge_only_for_verified(user_repo, two_factor) -> None:
    svc = _service(user_repo, two_factor, RecordingNotifier())
    user_repo.authenticate = AsyncMock(return_value=_orm_user(is_verified=False))
    with pytest.raises(AccountNotVerifiedException):
        await svc.login("ada@example.com", "pw")
    two_factor.issue_challenge.assert_not_awaited()

    user_repo.authenticate = AsyncMock(return_value=_orm_user())
    result = await svc.login("ada@example.com", "pw")
    two_factor.issue_challenge.assert_awaited_once_with(result)


async def test_login_bad_credentials(user_repo, two_factor) -> None:
    user_repo.authenticate = AsyncMock(return_value=None)
    svc = _service(user_repo, two_factor, RecordingNotifier())
    with pytest.raises(AuthenticationException) as exc_info:
        await svc.login("ada@example.com", "nope")
    assert exc_info.value.message == "Invalid email or password"


async def test_verify_email_requires_known_token(user_repo, two_factor) -> None:
    user_repo.get_by_verification_token = AsyncMock(return_value=None)
    svc = _service(user_repo, two_factor, RecordingNotifier())
    with pytest.raises(ValidationException):
        await svc.verify_email(None)
    with pytest.raises(ValidationException) as exc_info:
        await svc.verify_email("deadbeef")
    assert exc_info.value.message == "Invalid or expired verification token"


async def test_login_url_strips_trailing_slash(user_repo, two_factor) -> None:
    svc = _service(user_repo, two_factor, RecordingNotifier())
    assert svc.login_url == "http://app.example.com/login"


async def test_forgot_password_unknown_email(user_repo, two_factor) -> None:
    user_repo.get_by_email = AsyncMock(return_value=None)
    svc = _service(user_repo, two_factor, RecordingNotifier())
    with pytest.raises(ResourceNotFoundException):
        await svc.forgot_password("ghost@example.com")


async def test_forgot_password_email_failure_surfaces(user_repo, two_factor) -> None:
    user_repo.get_by_email = AsyncMock(return_value=_orm_user())
    svc = _service(user_repo, two_factor, RecordingNotifier(fail=True))
    with pytest.raises(DependencyException):
        await svc.forgot_password("ada@example.com")
    user_repo.set_reset_token.assert_awaited_once()


async def test_change_password_checks_current(user_repo, two_factor) -> None:
    user_repo.get_by_id = AsyncMock(return_value=_orm_user())
    user_repo.check_password = AsyncMock(return_value=False)
    svc = _service(user_repo, two_factor, RecordingNotifier())
    with pytest.raises(AuthenticationException) as exc_info:
        await svc.change_password(3, "wrong", "new-password")
    assert exc_info.value.message == "Current password is incorrect"
    user_repo.set_password.assert_not_awaited()
