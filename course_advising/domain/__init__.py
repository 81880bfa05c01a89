"""Domain layer: entities, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from course_advising.domain.entities import (
    CourseRequest,
    PendingChallenge,
)
from course_advising.domain.enums import AdvisingStatus
from course_advising.domain.exceptions import (
    AdvisingAppException,
    AuthenticationException,
    ResourceNotFoundException,
    ValidationException,
)

__all__ = [
    # Entities
    "CourseRequest",
    "PendingChallenge",
    # Enums
    "AdvisingStatus",
    # Exceptions
    "AdvisingAppException",
    "AuthenticationException",
    "ResourceNotFoundException",
    "ValidationException",
]
