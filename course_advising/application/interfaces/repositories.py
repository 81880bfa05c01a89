"""Repository interfaces (ports) for the application layer.

Services depend on these protocols, not on SQLAlchemy repositories (DIP).
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from course_advising.application.dtos.advising import (
        AdvisingEntryResult,
        AdvisingSubmission,
    )
    from course_advising.application.dtos.user import UserResult
    from course_advising.domain.entities.advising_entry import CourseRequest
    from course_advising.domain.enums import AdvisingStatus


class IUserLookup(Protocol):
    """Read-only user lookup needed by the two-factor gate and the review workflow."""

    async def get_result(self, user_id: int) -> UserResult | None:
        """Return the user read-model or None."""
        ...


class IAdvisingRepository(Protocol):
    """Advising persistence: entries, course lists, status-guarded updates."""

    async def create_entry(self, user_id: int, submission: AdvisingSubmission) -> int:
        ...

    async def get_status(self, entry_id: int) -> AdvisingStatus | None:
        ...

    async def update_if_pending(
        self, entry_id: int, submission: AdvisingSubmission
    ) -> bool:
        ...

    async def review_if_pending(
        self,
        entry_id: int,
        status: AdvisingStatus,
        admin_message: str,
        admin_id: int,
        reviewed_at: datetime,
    ) -> bool:
        ...

    async def replace_courses(
        self, entry_id: int, courses: Iterable[CourseRequest]
    ) -> None:
        ...

    async def get_result(self, entry_id: int) -> AdvisingEntryResult | None:
        ...

    async def list_for_user(self, user_id: int) -> list[AdvisingEntryResult]:
        ...

    async def list_all_with_students(self) -> list[AdvisingEntryResult]:
        ...

    async def commit(self) -> None:
        ...
