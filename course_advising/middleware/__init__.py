"""HTTP middleware: timeout and request ID / access logging.

Applied in main app; order matters (first added = outermost).
Import and use from course_advising.main.
"""

from course_advising.middleware.request_id import RequestIDMiddleware
from course_advising.middleware.timeout import TimeoutMiddleware

__all__ = [
    "RequestIDMiddleware",
    "TimeoutMiddleware",
]
