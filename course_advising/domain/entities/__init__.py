"""Domain entities and aggregates.

Pure domain models; no ORM or persistence concerns.
"""

from course_advising.domain.entities.advising_entry import (
    CourseRequest,
    parse_decision,
)
from course_advising.domain.entities.pending_challenge import PendingChallenge

__all__ = [
    "CourseRequest",
    "PendingChallenge",
    "parse_decision",
]
