"""Pending two-factor challenge value.

Ephemeral: lives only in a challenge store, keyed by user id.
"""

from dataclasses import dataclass
from datetime import datetime

from course_advising.shared.utils.datetime import ensure_utc


@dataclass(frozen=True)
class PendingChallenge:
    """A 6-digit code bound to a user with an absolute expiry instant."""

    code: str
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        """Return True once now is strictly past the expiry instant."""
        return ensure_utc(now) > ensure_utc(self.expires_at)

    def matches(self, submitted: str) -> bool:
        """Compare as strings after trimming; leading zeros are significant."""
        return submitted.strip() == self.code
