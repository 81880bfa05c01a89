"""Advising repository: entries, their course lists, and status-guarded updates.

Interface methods return application DTOs. Status transitions use
conditional UPDATEs (``WHERE status = 'Pending'``) so a concurrent review
or edit cannot overwrite a decision that already landed.
"""

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from course_advising.application.dtos.advising import (
    AdvisingEntryResult,
    AdvisingSubmission,
)
from course_advising.domain.entities.advising_entry import CourseRequest
from course_advising.domain.enums import AdvisingStatus
from course_advising.domain.exceptions import ResourceNotFoundException
from course_advising.infrastructure.persistence.models.advising import (
    AdvisingCourse,
    AdvisingEntry,
)
from course_advising.infrastructure.persistence.models.user import User
from course_advising.infrastructure.persistence.repositories.base import BaseRepository
from course_advising.shared.utils.datetime import ensure_utc

logger = logging.getLogger(__name__)


def _entry_to_result(
    e: AdvisingEntry,
    courses: Sequence[CourseRequest] = (),
    *,
    student_name: str | None = None,
    student_email: str | None = None,
) -> AdvisingEntryResult:
    """Map ORM AdvisingEntry (plus its loaded courses) to AdvisingEntryResult."""
    return AdvisingEntryResult(
        id=e.id,
        user_id=e.user_id,
        created_at=ensure_utc(e.created_at),
        last_term=e.last_term,
        last_gpa=e.last_gpa,
        current_term=e.current_term,
        status=AdvisingStatus(e.status),
        admin_message=e.admin_message,
        admin_id=e.admin_id,
        reviewed_at=ensure_utc(e.reviewed_at),
        courses=tuple(courses),
        student_name=student_name,
        student_email=student_email,
    )


class AdvisingRepository(BaseRepository[AdvisingEntry]):
    """Advising entry repository. Create, status-guarded update, course replace, projections."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, AdvisingEntry)

    async def _on_after_create(self, obj: AdvisingEntry) -> None:
        logger.info("Advising entry created: id=%s user_id=%s", obj.id, obj.user_id)

    async def create_entry(self, user_id: int, submission: AdvisingSubmission) -> int:
        """Insert a Pending entry and return its id.

        Raises:
            ResourceNotFoundException: If user_id does not reference a user.
        """
        entry = AdvisingEntry(
            user_id=user_id,
            last_term=submission.last_term,
            last_gpa=submission.last_gpa,
            current_term=submission.current_term,
            status=AdvisingStatus.PENDING.value,
        )
        try:
            created = await self.create(entry)
        except IntegrityError:
            raise ResourceNotFoundException("user", user_id)
        return created.id

    async def get_status(self, entry_id: int) -> AdvisingStatus | None:
        """Return the entry's current status, or None when it does not exist."""
        result = await self.db.execute(
            select(AdvisingEntry.status).where(AdvisingEntry.id == entry_id)
        )
        raw = result.scalar_one_or_none()
        return AdvisingStatus(raw) if raw is not None else None

    async def update_if_pending(
        self, entry_id: int, submission: AdvisingSubmission
    ) -> bool:
        """Overwrite submission fields only while Pending. Returns True if a row changed."""
        result = await self.db.execute(
            update(AdvisingEntry)
            .where(
                AdvisingEntry.id == entry_id,
                AdvisingEntry.status == AdvisingStatus.PENDING.value,
            )
            .values(
                last_term=submission.last_term,
                last_gpa=submission.last_gpa,
                current_term=submission.current_term,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def review_if_pending(
        self,
        entry_id: int,
        status: AdvisingStatus,
        admin_message: str,
        admin_id: int,
        reviewed_at: datetime,
    ) -> bool:
        """Compare-and-set Pending -> status with review fields. Returns True if it won.

        Raises:
            ResourceNotFoundException: If admin_id does not reference a user.
        """
        try:
            result = await self.db.execute(
                update(AdvisingEntry)
                .where(
                    AdvisingEntry.id == entry_id,
                    AdvisingEntry.status == AdvisingStatus.PENDING.value,
                )
                .values(
                    status=status.value,
                    admin_message=admin_message,
                    admin_id=admin_id,
                    reviewed_at=reviewed_at,
                )
                .execution_options(synchronize_session=False)
            )
        except IntegrityError:
            raise ResourceNotFoundException("reviewer", admin_id)
        return result.rowcount == 1

    async def replace_courses(
        self, entry_id: int, courses: Iterable[CourseRequest]
    ) -> None:
        """Delete every course row of the entry, then insert the given list in order."""
        await self.db.execute(
            delete(AdvisingCourse)
            .where(AdvisingCourse.advising_id == entry_id)
            .execution_options(synchronize_session=False)
        )
        rows = [
            {
                "advising_id": entry_id,
                "course_level": c.course_level,
                "course_name": c.course_name,
            }
            for c in courses
        ]
        if rows:
            await self.db.execute(insert(AdvisingCourse), rows)

    async def courses_for(
        self, entry_ids: Sequence[int]
    ) -> dict[int, list[CourseRequest]]:
        """Return course lists for many entries in one query (insertion order)."""
        if not entry_ids:
            return {}
        result = await self.db.execute(
            select(AdvisingCourse)
            .where(AdvisingCourse.advising_id.in_(entry_ids))
            .order_by(AdvisingCourse.advising_id, AdvisingCourse.id)
        )
        by_entry: dict[int, list[CourseRequest]] = {i: [] for i in entry_ids}
        for row in result.scalars().all():
            by_entry[row.advising_id].append(
                CourseRequest(course_level=row.course_level, course_name=row.course_name)
            )
        return by_entry

    async def get_result(self, entry_id: int) -> AdvisingEntryResult | None:
        entry = await self.get_by_id(entry_id)
        if entry is None:
            return None
        # Re-read so a status-guarded UPDATE in this session is visible.
        await self.db.refresh(entry)
        courses = await self.courses_for([entry.id])
        return _entry_to_result(entry, courses[entry.id])

    async def list_for_user(self, user_id: int) -> list[AdvisingEntryResult]:
        """Entries of one student, newest first."""
        result = await self.db.execute(
            select(AdvisingEntry)
            .where(AdvisingEntry.user_id == user_id)
            .order_by(AdvisingEntry.created_at.desc(), AdvisingEntry.id.desc())
        )
        entries = list(result.scalars().all())
        courses = await self.courses_for([e.id for e in entries])
        return [_entry_to_result(e, courses[e.id]) for e in entries]

    async def list_all_with_students(self) -> list[AdvisingEntryResult]:
        """All entries with the submitter's display name and email, newest first."""
        result = await self.db.execute(
            select(AdvisingEntry, User.first_name, User.last_name, User.email)
            .join(User, User.id == AdvisingEntry.user_id)
            .order_by(AdvisingEntry.created_at.desc(), AdvisingEntry.id.desc())
        )
        rows = result.all()
        courses = await self.courses_for([row[0].id for row in rows])
        return [
            _entry_to_result(
                entry,
                courses[entry.id],
                student_name=f"{first} {last}".strip(),
                student_email=email,
            )
            for entry, first, last, email in rows
        ]
