"""Infrastructure implementations of application service interfaces."""

from course_advising.infrastructure.services.email_template_renderer import (
    EmailTemplateRenderer,
)
from course_advising.infrastructure.services.notification_service import (
    LogOnlyNotifier,
    NotificationDispatcher,
    SmtpNotifier,
    build_notifier,
)

__all__ = [
    "EmailTemplateRenderer",
    "LogOnlyNotifier",
    "NotificationDispatcher",
    "SmtpNotifier",
    "build_notifier",
]
