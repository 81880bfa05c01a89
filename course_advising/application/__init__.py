"""Application layer: DTOs, interfaces, services.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories, stores, notifiers).
"""

from course_advising.application.interfaces import (
    IAdvisingRepository,
    IChallengeStore,
    INotificationDispatcher,
    INotifier,
    ITemplateRenderer,
    IUserLookup,
)
from course_advising.application.services import (
    AccountService,
    AdvisingService,
    TwoFactorService,
)

__all__ = [
    "AccountService",
    "AdvisingService",
    "IAdvisingRepository",
    "IChallengeStore",
    "INotificationDispatcher",
    "INotifier",
    "ITemplateRenderer",
    "IUserLookup",
    "TwoFactorService",
]
