"""Outbound email: SMTP sender, log-only sender, and background dispatcher."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Any

import aiosmtplib

from course_advising.core.config import Settings
from course_advising.shared.telemetry.logging import get_logger
from course_advising.shared.utils.datetime import utc_now

logger = get_logger(__name__)


class SmtpNotifier:
    """INotifier implementation that delivers HTML email over SMTP (aiosmtplib).

    send() never raises: failures are logged and reported as False.
    """

    def __init__(
        self,
        host: str,
        port: int,
        from_email: str,
        from_name: str,
        username: str | None = None,
        password: str | None = None,
        *,
        start_tls: bool = True,
        timeout: float = 30.0,
    ) -> None:
        self.host = host
        self.port = port
        self.from_email = from_email
        self.from_name = from_name
        self.username = username or None
        self.password = password or None
        self.start_tls = start_tls
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> SmtpNotifier:
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            from_email=settings.smtp_from_email,
            from_name=settings.smtp_from_name,
            username=settings.smtp_user,
            password=(
                settings.smtp_password.get_secret_value()
                if settings.smtp_password
                else None
            ),
            start_tls=settings.smtp_use_tls,
            timeout=float(settings.smtp_timeout_seconds),
        )

    def _build_message(self, to_email: str, subject: str, html_body: str) -> MIMEMultipart:
        message = MIMEMultipart("alternative")
        message["From"] = f"{self.from_name} <{self.from_email}>"
        message["To"] = to_email
        message["Subject"] = subject
        message.attach(MIMEText(html_body, "html"))
        return message

    async def send(self, to_email: str, subject: str, html_body: str) -> bool:
        """Send one HTML message. Returns False (and logs) on any SMTP failure."""
        message = self._build_message(to_email, subject, html_body)
        try:
            await aiosmtplib.send(
                message,
                hostname=self.host,
                port=self.port,
                username=self.username,
                password=self.password,
                start_tls=self.start_tls,
                timeout=self.timeout,
            )
        except (aiosmtplib.SMTPException, OSError, asyncio.TimeoutError) as e:
            logger.error("Email to %s failed (subject=%r): %s", to_email, subject[:80], e)
            return False
        logger.info("Email sent to %s (subject=%r)", to_email, subject[:80])
        return True


class LogOnlyNotifier:
    """INotifier implementation that logs instead of sending email.

    Use when no SMTP is configured. Production swaps in SmtpNotifier.
    """

    async def send(self, to_email: str, subject: str, html_body: str) -> bool:
        """Log the notification; no actual email sent."""
        subject_preview = (subject or "")[:80]
        if not to_email:
            logger.info("Notify: no recipient, skipping send (subject=%r)", subject_preview)
            return False
        logger.info("Notify: would send to %s (subject=%r)", to_email, subject_preview)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Notify body at %s (first 500 chars): %s",
                utc_now().isoformat(),
                (html_body or "")[:500],
            )
        return True


class NotificationDispatcher:
    """Runs deliveries as background asyncio tasks after the triggering change committed.

    Keeps a reference to every in-flight task (so none is garbage collected
    mid-send) and logs failures instead of propagating them. drain() waits
    for outstanding deliveries; the app calls it on shutdown.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def dispatch(self, label: str, deliver: Callable[[], Awaitable[Any]]) -> None:
        """Schedule deliver() on the running loop; returns immediately."""
        task = asyncio.create_task(self._run(label, deliver), name=f"notify:{label}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, label: str, deliver: Callable[[], Awaitable[Any]]) -> None:
        try:
            result = await deliver()
        except Exception:
            logger.exception("Background notification %s failed", label)
            return
        if result is False:
            logger.warning("Background notification %s was not delivered", label)

    async def drain(self, timeout: float | None = 10.0) -> None:
        """Wait for in-flight deliveries (bounded by timeout, then cancel the rest)."""
        if not self._tasks:
            return
        tasks = list(self._tasks)
        done, still_running = await asyncio.wait(tasks, timeout=timeout)
        for task in still_running:
            task.cancel()
        if still_running:
            logger.warning(
                "Cancelled %d notification(s) still running at shutdown",
                len(still_running),
            )
        logger.info("Notification dispatcher drained (%d completed)", len(done))


def build_notifier(settings: Settings) -> SmtpNotifier | LogOnlyNotifier:
    """Return SmtpNotifier when SMTP_HOST is configured, else LogOnlyNotifier."""
    if settings.smtp_configured:
        return SmtpNotifier.from_settings(settings)
    logger.info("SMTP not configured; outgoing email will only be logged")
    return LogOnlyNotifier()
