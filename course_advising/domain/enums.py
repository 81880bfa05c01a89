"""Domain enumerations for the course advising application.

Enums represent fixed sets of domain values (e.g. advising status).
"""

from enum import Enum


class AdvisingStatus(str, Enum):
    """Advising entry lifecycle status.

    PENDING is the only initial and only editable state; APPROVED and
    REJECTED are terminal.
    """

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings.

        Returns:
            List of enum value strings (e.g. for validation or serialization).
        """
        return [status.value for status in cls]

    @classmethod
    def decisions(cls) -> list[str]:
        """Return the statuses a reviewer may choose."""
        return [cls.APPROVED.value, cls.REJECTED.value]

    @property
    def is_terminal(self) -> bool:
        return self is not AdvisingStatus.PENDING
