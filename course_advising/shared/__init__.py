"""Shared utilities: telemetry and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from course_advising.shared.utils import (
    ensure_utc,
    generate_token,
    generate_two_factor_code,
    utc_now,
)

__all__ = [
    "utc_now",
    "ensure_utc",
    "generate_token",
    "generate_two_factor_code",
]
