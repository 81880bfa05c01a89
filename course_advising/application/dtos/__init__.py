"""Application DTOs: read-models and command payloads passed between layers."""

from course_advising.application.dtos.advising import (
    AdvisingEntryResult,
    AdvisingSubmission,
    ReviewNotice,
)
from course_advising.application.dtos.user import UserResult

__all__ = [
    "AdvisingEntryResult",
    "AdvisingSubmission",
    "ReviewNotice",
    "UserResult",
]
