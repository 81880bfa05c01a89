"""Persistence repositories. Re-exports for dependency injection."""

from course_advising.infrastructure.persistence.repositories.advising_repo import (
    AdvisingRepository,
)
from course_advising.infrastructure.persistence.repositories.base import BaseRepository
from course_advising.infrastructure.persistence.repositories.user_repo import (
    UserRepository,
)

__all__ = [
    "AdvisingRepository",
    "BaseRepository",
    "UserRepository",
]
