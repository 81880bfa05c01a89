"""DTOs for advising use cases (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import datetime

from course_advising.domain.entities.advising_entry import CourseRequest
from course_advising.domain.enums import AdvisingStatus


@dataclass(frozen=True)
class AdvisingSubmission:
    """Student-provided fields for submit and edit."""

    current_term: str | None
    last_term: str | None = None
    last_gpa: float | None = None
    courses: tuple[CourseRequest, ...] = ()


@dataclass(frozen=True)
class AdvisingEntryResult:
    """Advising entry read-model with its course list."""

    id: int
    user_id: int
    created_at: datetime | None
    last_term: str | None
    last_gpa: float | None
    current_term: str | None
    status: AdvisingStatus
    admin_message: str | None = None
    admin_id: int | None = None
    reviewed_at: datetime | None = None
    courses: tuple[CourseRequest, ...] = field(default_factory=tuple)
    # Populated only for the admin listing
    student_name: str | None = None
    student_email: str | None = None


@dataclass(frozen=True)
class ReviewNotice:
    """Everything needed to tell a student about a review decision.

    Captured inside the review transaction so delivery can run after
    commit without touching the session.
    """

    entry_id: int
    to_email: str
    student_name: str
    current_term: str | None
    status: AdvisingStatus
    feedback: str
    courses: tuple[CourseRequest, ...] = ()
