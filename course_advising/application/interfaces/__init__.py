"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from course_advising.infrastructure or course_advising.api.
"""

from course_advising.application.interfaces.repositories import (
    IAdvisingRepository,
    IUserLookup,
)
from course_advising.application.interfaces.services import (
    IChallengeStore,
    INotificationDispatcher,
    INotifier,
    ITemplateRenderer,
)

__all__ = [
    "IAdvisingRepository",
    "IChallengeStore",
    "INotificationDispatcher",
    "INotifier",
    "ITemplateRenderer",
    "IUserLookup",
]
