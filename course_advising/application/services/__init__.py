"""Application services: two-factor gate, advising workflow, accounts."""

from course_advising.application.services.account_service import AccountService
from course_advising.application.services.advising_service import AdvisingService
from course_advising.application.services.two_factor_service import TwoFactorService

__all__ = [
    "AccountService",
    "AdvisingService",
    "TwoFactorService",
]
