"""Service interfaces (ports) for the application layer.

Protocols define contracts for application services (DIP).
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from course_advising.domain.entities.pending_challenge import PendingChallenge


# Challenge store interface
class IChallengeStore(Protocol):
    """Protocol for the pending two-factor challenge store (one record per user id).

    put overwrites (last writer wins); no background expiry is required,
    the verifier checks expiry itself.
    """

    async def put(self, user_id: int, challenge: PendingChallenge) -> None:
        """Store or replace the challenge for user_id."""
        ...

    async def get(self, user_id: int) -> PendingChallenge | None:
        """Return the stored challenge or None."""
        ...

    async def delete(self, user_id: int) -> None:
        """Remove the challenge for user_id (no-op if absent)."""
        ...


# Outbound email interface
class INotifier(Protocol):
    """Protocol for outbound email delivery. Implementations never raise."""

    async def send(self, to_email: str, subject: str, html_body: str) -> bool:
        """Deliver one message. Returns True on success, False on any failure."""
        ...


# Background delivery interface
class INotificationDispatcher(Protocol):
    """Protocol for fire-and-forget delivery after a state change committed."""

    def dispatch(
        self, label: str, deliver: Callable[[], Awaitable[Any]]
    ) -> None:
        """Schedule deliver() without awaiting it; failures are logged only."""
        ...


# Email template interface
class ITemplateRenderer(Protocol):
    """Protocol for rendering (subject, html_body) pairs from named templates."""

    def render(self, template_key: str, context: dict[str, Any]) -> tuple[str, str]:
        """Return (subject, html_body) for template_key rendered with context."""
        ...
