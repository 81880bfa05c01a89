"""TwoFactorService unit tests: issue, resend, verify with a controllable clock."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from course_advising.application.dtos.user import UserResult
from course_advising.application.services import TwoFactorService
from course_advising.domain.exceptions import (
    ChallengeExpiredException,
    CodeMismatchException,
    NoPendingChallengeException,
    ResourceNotFoundException,
)
from course_advising.infrastructure.cache.challenge_store import InMemoryChallengeStore
from course_advising.infrastructure.services import EmailTemplateRenderer
from tests.fakes import RaisingNotifier, RecordingNotifier

T0 = datetime(2025, 9, 1, 12, 0, 0, tzinfo=UTC)


def _user(user_id: int = 7) -> UserResult:
    return UserResult(
        id=user_id,
        first_name="Grace",
        last_name="Hopper",
        email="grace@example.com",
        is_verified=True,
        is_admin=False,
    )


class FakeClock:
    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class SequenceCodes:
    def __init__(self, *codes: str) -> None:
        self._codes = list(codes)

    def __call__(self) -> str:
        return self._codes.pop(0)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryChallengeStore:
    return InMemoryChallengeStore()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def users() -> AsyncMock:
    lookup = AsyncMock()
    lookup.get_result = AsyncMock(return_value=_user())
    return lookup


def _service(store, notifier, users, clock, *codes, **kwargs) -> TwoFactorService:
    return TwoFactorService(
        store,
        notifier,
        EmailTemplateRenderer(),
        users,
        clock=clock,
        code_generator=SequenceCodes(*codes) if codes else (lambda: "123456"),
        **kwargs,
    )


async def test_issue_stores_challenge_and_emails_code(store, notifier, users, clock) -> None:
    svc = _service(store, notifier, users, clock, "482913")
    challenge = await svc.issue_challenge(_user())
    assert challenge.code == "482913"
    assert challenge.expires_at == T0 + timedelta(minutes=5)
    assert await store.get(7) == challenge
    assert len(notifier.sent) == 1
    email = notifier.sent[0]
    assert email.to_email == "grace@example.com"
    assert email.subject == "Your login verification code"
    assert "482913" in email.html_body


async def test_verify_with_exact_code_succeeds_once(store, notifier, users, clock) -> None:
    svc = _service(store, notifier, users, clock, "482913")
    await svc.issue_challenge(_user())
    user = await svc.verify_challenge(7, "482913")
    assert user.id == 7
    assert await store.get(7) is None
    with pytest.raises(NoPendingChallengeException):
        await svc.verify_challenge(7, "482913")


async def test_verify_trims_surrounding_whitespace(store, notifier, users, clock) -> None:
    svc = _service(store, notifier, users, clock, "482913")
    await svc.issue_challenge(_user())
    user = await svc.verify_challenge(7, " 482913\n")
    assert user.id == 7


async def test_verify_without_challenge_raises(store, notifier, users, clock) -> None:
    svc = _service(store, notifier, users, clock)
    with pytest.raises(NoPendingChallengeException) as exc_info:
        await svc.verify_challenge(7, "000000")
    assert exc_info.value.message == "No 2FA request found or already verified"


async def test_expired_challenge_rejected_even_with_right_code(
    store, notifier, users, clock
) -> None:
    svc = _service(store, notifier, users, clock, "482913")
    await svc.issue_challenge(_user())
    clock.advance(300.001)
    with pytest.raises(ChallengeExpiredException):
        await svc.verify_challenge(7, "482913")
    # Expired record is removed, so a retry reports no pending challenge.
    assert await store.get(7) is None
    with pytest.raises(NoPendingChallengeException):
        await svc.verify_challenge(7, "482913")


async def test_challenge_valid_at_exact_expiry_instant(store, notifier, users, clock) -> None:
    svc = _service(store, notifier, users, clock, "482913")
    await svc.issue_challenge(_user())
    clock.advance(300)
    user = await svc.verify_challenge(7, "482913")
    assert user.id == 7


async def test_leading_zero_is_significant(store, notifier, users, clock) -> None:
    svc = _service(store, notifier, users, clock, "012345")
    await svc.issue_challenge(_user())
    with pytest.raises(CodeMismatchException):
        await svc.verify_challenge(7, "12345")
    # Mismatch keeps the challenge pending.
    user = await svc.verify_challenge(7, "012345")
    assert user.id == 7


async def test_second_issue_invalidates_first_code(store, notifier, users, clock) -> None:
    svc = _service(store, notifier, users, clock, "111111", "222222")
    await svc.issue_challenge(_user())
    await svc.issue_challenge(_user())
    with pytest.raises(CodeMismatchException):
        await svc.verify_challenge(7, "111111")
    user = await svc.verify_challenge(7, "222222")
    assert user.id == 7


async def test_resend_replaces_code_and_marks_subject(store, notifier, users, clock) -> None:
    svc = _service(store, notifier, users, clock, "111111", "222222")
    await svc.issue_challenge(_user())
    clock.advance(120)
    challenge = await svc.resend_challenge(7)
    assert challenge.code == "222222"
    assert challenge.expires_at == T0 + timedelta(seconds=420)
    assert notifier.sent[-1].subject == "Your login verification code (resend)"
    users.get_result.assert_awaited_with(7)


async def test_resend_for_unknown_user_raises_not_found(store, notifier, users, clock) -> None:
    users.get_result = AsyncMock(return_value=None)
    svc = _service(store, notifier, users, clock)
    with pytest.raises(ResourceNotFoundException):
        await svc.resend_challenge(99)
    assert len(store) == 0


async def test_email_failure_does_not_fail_issue(store, users, clock) -> None:
    failing = RecordingNotifier(fail=True)
    svc = _service(store, failing, users, clock, "482913")
    await svc.issue_challenge(_user())
    assert (await store.get(7)).code == "482913"


async def test_raising_notifier_does_not_fail_issue(store, users, clock) -> None:
    svc = _service(store, RaisingNotifier(), users, clock, "482913")
    challenge = await svc.issue_challenge(_user())
    assert await store.get(7) == challenge


async def test_codes_logged_only_when_enabled(store, notifier, users, clock, caplog) -> None:
    quiet = _service(store, notifier, users, clock, "482913")
    with caplog.at_level("INFO"):
        await quiet.issue_challenge(_user())
    assert "482913" not in caplog.text

    chatty = _service(store, notifier, users, clock, "654321", log_codes=True)
    with caplog.at_level("INFO"):
        await chatty.issue_challenge(_user())
    assert "654321" in caplog.text


async def test_custom_ttl(store, notifier, users, clock) -> None:
    svc = _service(store, notifier, users, clock, "482913", code_ttl_seconds=60)
    challenge = await svc.issue_challenge(_user())
    assert challenge.expires_at == T0 + timedelta(seconds=60)
    assert "1 minutes" in notifier.sent[-1].html_body
