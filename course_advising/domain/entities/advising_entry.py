"""Advising entry domain values.

A submission owns a list of requested courses and moves from Pending to
a terminal decision exactly once. The transition itself is enforced at
the persistence boundary with a status-guarded update.
"""

from dataclasses import dataclass

from course_advising.domain.enums import AdvisingStatus
from course_advising.domain.exceptions import InvalidDecisionException


@dataclass(frozen=True)
class CourseRequest:
    """One requested course (level + name) within an advising entry."""

    course_level: str
    course_name: str


def parse_decision(decision: AdvisingStatus | str) -> AdvisingStatus:
    """Return the terminal status named by decision.

    Matching is exact and case-sensitive ('Approved', 'Rejected').

    Raises:
        InvalidDecisionException: If decision is Pending or not a status at all.
    """
    raw = decision.value if isinstance(decision, AdvisingStatus) else str(decision)
    if raw not in AdvisingStatus.decisions():
        raise InvalidDecisionException(raw, AdvisingStatus.decisions())
    return AdvisingStatus(raw)
