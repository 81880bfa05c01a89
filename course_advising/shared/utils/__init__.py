"""Shared utilities: datetime and generators."""

from course_advising.shared.utils.datetime import ensure_utc, utc_now
from course_advising.shared.utils.generators import (
    generate_token,
    generate_two_factor_code,
)

__all__ = [
    "utc_now",
    "ensure_utc",
    "generate_token",
    "generate_two_factor_code",
]
