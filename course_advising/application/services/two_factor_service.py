"""Two-factor login gate: issue, resend, and verify short-lived email codes.

State per user id is either no challenge or one pending (code, expiry)
record. Issuing replaces any earlier record. A mismatch leaves the record
in place; success and detected expiry remove it. Email delivery is
fail-open: the code is stored whether or not the message went out.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta

from course_advising.application.dtos.user import UserResult
from course_advising.application.interfaces.repositories import IUserLookup
from course_advising.application.interfaces.services import (
    IChallengeStore,
    INotifier,
    ITemplateRenderer,
)
from course_advising.core.constants import (
    TEMPLATE_TWO_FACTOR_CODE,
    TEMPLATE_TWO_FACTOR_CODE_RESEND,
)
from course_advising.domain.entities.pending_challenge import PendingChallenge
from course_advising.domain.exceptions import (
    ChallengeExpiredException,
    CodeMismatchException,
    NoPendingChallengeException,
    ResourceNotFoundException,
)
from course_advising.shared.telemetry.logging import get_logger
from course_advising.shared.utils.datetime import utc_now
from course_advising.shared.utils.generators import generate_two_factor_code

logger = get_logger(__name__)

DEFAULT_CODE_TTL_SECONDS = 300


class TwoFactorService:
    """Credential verification gate for the second login step.

    Args:
        store: Pending challenge store (in-memory or Redis).
        notifier: Outbound email sender.
        renderer: Email template renderer.
        users: User lookup (resend and successful verify).
        code_ttl_seconds: Lifetime of a code; default five minutes.
        log_codes: Log issued codes for local development. Never enabled in production.
        clock: Returns the current UTC time; injectable for tests.
        code_generator: Returns a fresh 6-digit code; injectable for tests.
    """

    def __init__(
        self,
        store: IChallengeStore,
        notifier: INotifier,
        renderer: ITemplateRenderer,
        users: IUserLookup,
        *,
        code_ttl_seconds: int = DEFAULT_CODE_TTL_SECONDS,
        log_codes: bool = False,
        clock: Callable[[], datetime] = utc_now,
        code_generator: Callable[[], str] = generate_two_factor_code,
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._renderer = renderer
        self._users = users
        self._ttl = timedelta(seconds=code_ttl_seconds)
        self._log_codes = log_codes
        self._clock = clock
        self._generate = code_generator

    async def issue_challenge(
        self, user: UserResult, *, resend: bool = False
    ) -> PendingChallenge:
        """Create (or replace) the user's challenge and email the code.

        Returns:
            The stored challenge.
        """
        challenge = PendingChallenge(
            code=self._generate(),
            expires_at=self._clock() + self._ttl,
        )
        await self._store.put(user.id, challenge)
        if self._log_codes:
            logger.info("[dev] 2FA code for user %s: %s", user.id, challenge.code)

        subject, body = self._renderer.render(
            TEMPLATE_TWO_FACTOR_CODE_RESEND if resend else TEMPLATE_TWO_FACTOR_CODE,
            {
                "code": challenge.code,
                "ttl_minutes": int(self._ttl.total_seconds() // 60),
            },
        )
        try:
            sent = await self._notifier.send(user.email, subject, body)
        except Exception:
            logger.exception("2FA email to user %s raised; login continues", user.id)
            sent = False
        if not sent:
            logger.warning("2FA email to user %s was not delivered", user.id)
        return challenge

    async def resend_challenge(self, user_id: int) -> PendingChallenge:
        """Issue a fresh code for user_id without a password check.

        Raises:
            ResourceNotFoundException: If the user does not exist.
        """
        user = await self._users.get_result(user_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        return await self.issue_challenge(user, resend=True)

    async def verify_challenge(self, user_id: int, submitted_code: str) -> UserResult:
        """Check a submitted code and consume the challenge on success.

        Raises:
            NoPendingChallengeException: No challenge stored for user_id.
            ChallengeExpiredException: Challenge is past expiry (it is removed).
            CodeMismatchException: Code differs; the challenge stays pending.
            ResourceNotFoundException: Code matched but the user no longer exists.
        """
        challenge = await self._store.get(user_id)
        if challenge is None:
            raise NoPendingChallengeException(user_id)
        if challenge.is_expired(self._clock()):
            await self._store.delete(user_id)
            raise ChallengeExpiredException(user_id)
        if not challenge.matches(submitted_code):
            raise CodeMismatchException(user_id)
        await self._store.delete(user_id)
        user = await self._users.get_result(user_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        logger.info("2FA verified for user %s", user_id)
        return user
