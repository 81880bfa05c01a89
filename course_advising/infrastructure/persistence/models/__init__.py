"""Persistence models: ORM entities and mixins."""

from course_advising.infrastructure.persistence.models.advising import (
    AdvisingCourse,
    AdvisingEntry,
)
from course_advising.infrastructure.persistence.models.mixins import (
    CreatedAtMixin,
    IntegerIdMixin,
    TimestampMixin,
)
from course_advising.infrastructure.persistence.models.user import User

__all__ = [
    "AdvisingCourse",
    "AdvisingEntry",
    "CreatedAtMixin",
    "IntegerIdMixin",
    "TimestampMixin",
    "User",
]
