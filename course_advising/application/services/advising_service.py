"""Advising review workflow: submit, edit while pending, review once, read projections.

Entries start Pending and are editable only in that state. A review moves
them to Approved or Rejected exactly once; the transition is a
status-guarded UPDATE so concurrent reviewers cannot both win. The student
is emailed after the transaction commits, in the background.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from course_advising.application.dtos.advising import (
    AdvisingEntryResult,
    AdvisingSubmission,
    ReviewNotice,
)
from course_advising.application.interfaces.repositories import (
    IAdvisingRepository,
    IUserLookup,
)
from course_advising.application.interfaces.services import (
    INotificationDispatcher,
    INotifier,
    ITemplateRenderer,
)
from course_advising.core.constants import TEMPLATE_ADVISING_REVIEWED
from course_advising.domain.entities.advising_entry import parse_decision
from course_advising.domain.exceptions import (
    AlreadyReviewedException,
    EmptyFeedbackException,
    MissingFieldsException,
    MissingOwnerException,
    NotPendingException,
    ResourceNotFoundException,
)
from course_advising.shared.telemetry.logging import get_logger
from course_advising.shared.utils.datetime import utc_now

logger = get_logger(__name__)


def _is_missing(value: object) -> bool:
    return value is None or (isinstance(value, str) and value == "")


class AdvisingService:
    """Lifecycle of advising entries (Pending -> Approved | Rejected)."""

    def __init__(
        self,
        repo: IAdvisingRepository,
        users: IUserLookup,
        notifier: INotifier,
        renderer: ITemplateRenderer,
        dispatcher: INotificationDispatcher,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._repo = repo
        self._users = users
        self._notifier = notifier
        self._renderer = renderer
        self._dispatcher = dispatcher
        self._clock = clock

    async def submit(self, user_id: int | None, submission: AdvisingSubmission) -> int:
        """Create a Pending entry with its course list (may be empty). Returns the new id.

        Raises:
            MissingOwnerException: If user_id is absent.
        """
        if not user_id:
            raise MissingOwnerException()
        entry_id = await self._repo.create_entry(user_id, submission)
        await self._repo.replace_courses(entry_id, submission.courses)
        logger.info(
            "Advising entry %s submitted by user %s (%d courses)",
            entry_id,
            user_id,
            len(submission.courses),
        )
        return entry_id

    async def edit(self, entry_id: int, submission: AdvisingSubmission) -> None:
        """Overwrite fields and replace courses, only while Pending.

        Raises:
            ResourceNotFoundException: Unknown entry.
            NotPendingException: Entry already reviewed (nothing is changed).
        """
        updated = await self._repo.update_if_pending(entry_id, submission)
        if not updated:
            status = await self._repo.get_status(entry_id)
            if status is None:
                raise ResourceNotFoundException("advising_entry", entry_id)
            raise NotPendingException(entry_id, status.value)
        await self._repo.replace_courses(entry_id, submission.courses)
        logger.info("Advising entry %s edited", entry_id)

    async def review(
        self,
        entry_id: int,
        decision: str | None,
        message: str | None,
        reviewer_id: int | None,
    ) -> AdvisingEntryResult:
        """Record the terminal decision, commit, then notify the student in the background.

        Validation order: missing fields, invalid decision, blank feedback,
        unknown entry, unknown reviewer, lost race. The message is stored as
        given; trimming only decides whether it is blank.

        Raises:
            MissingFieldsException: decision, message or reviewer_id absent.
            InvalidDecisionException: decision is not Approved or Rejected.
            EmptyFeedbackException: message is blank after trimming.
            ResourceNotFoundException: Unknown entry or unknown reviewer.
            AlreadyReviewedException: Entry was no longer Pending.
        """
        missing = [
            name
            for name, value in (
                ("status", decision),
                ("admin_message", message),
                ("admin_id", reviewer_id),
            )
            if _is_missing(value)
        ]
        if missing:
            raise MissingFieldsException(missing)
        status = parse_decision(decision)
        if not message.strip():
            raise EmptyFeedbackException()
        feedback = message

        current = await self._repo.get_status(entry_id)
        if current is None:
            raise ResourceNotFoundException("advising_entry", entry_id)
        if await self._users.get_result(reviewer_id) is None:
            raise ResourceNotFoundException("reviewer", reviewer_id)
        won = await self._repo.review_if_pending(
            entry_id, status, feedback, reviewer_id, self._clock()
        )
        if not won:
            latest = await self._repo.get_status(entry_id)
            raise AlreadyReviewedException(entry_id, latest.value if latest else None)

        entry = await self._repo.get_result(entry_id)
        if entry is None:
            raise ResourceNotFoundException("advising_entry", entry_id)
        student = await self._users.get_result(entry.user_id)
        await self._repo.commit()
        logger.info(
            "Advising entry %s %s by admin %s", entry_id, status.value, reviewer_id
        )

        if student is None:
            logger.warning(
                "Advising entry %s reviewed but student %s no longer exists; no email",
                entry_id,
                entry.user_id,
            )
        else:
            self._schedule_notice(
                ReviewNotice(
                    entry_id=entry.id,
                    to_email=student.email,
                    student_name=student.full_name,
                    current_term=entry.current_term,
                    status=status,
                    feedback=feedback,
                    courses=entry.courses,
                )
            )
        return entry

    def _schedule_notice(self, notice: ReviewNotice) -> None:
        subject, body = self._renderer.render(
            TEMPLATE_ADVISING_REVIEWED,
            {
                "student_name": notice.student_name,
                "current_term": notice.current_term,
                "status": notice.status.value,
                "feedback": notice.feedback,
                "courses": notice.courses,
            },
        )

        async def deliver() -> bool:
            return await self._notifier.send(notice.to_email, subject, body)

        self._dispatcher.dispatch(f"advising-review:{notice.entry_id}", deliver)

    async def get_one(self, entry_id: int) -> AdvisingEntryResult:
        """Return one entry with its courses.

        Raises:
            ResourceNotFoundException: Unknown entry.
        """
        entry = await self._repo.get_result(entry_id)
        if entry is None:
            raise ResourceNotFoundException("advising_entry", entry_id)
        return entry

    async def history_for_user(self, user_id: int) -> list[AdvisingEntryResult]:
        """Entries submitted by user_id, newest first (empty list when none)."""
        return await self._repo.list_for_user(user_id)

    async def all_for_admin(self) -> list[AdvisingEntryResult]:
        """Every entry with submitter name and email, newest first."""
        return await self._repo.list_all_with_students()
