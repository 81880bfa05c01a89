"""Account application service: registration, email verification, login, passwords, profile.

Login is password-then-code: a correct password on a verified account only
issues a two-factor challenge (see TwoFactorService); the caller finishes
with the code.
"""

from __future__ import annotations

from typing import Any

from course_advising.application.dtos.user import UserResult
from course_advising.application.interfaces.services import (
    INotifier,
    ITemplateRenderer,
)
from course_advising.application.services.two_factor_service import TwoFactorService
from course_advising.core.constants import (
    TEMPLATE_EMAIL_VERIFIED,
    TEMPLATE_PASSWORD_RESET,
    TEMPLATE_VERIFY_EMAIL,
)
from course_advising.domain.exceptions import (
    AccountNotVerifiedException,
    AuthenticationException,
    DependencyException,
    ResourceNotFoundException,
    ValidationException,
)
from course_advising.shared.telemetry.logging import get_logger
from course_advising.shared.utils.generators import generate_token

logger = get_logger(__name__)


def _require(**fields: Any) -> None:
    """Raise ValidationException naming the first blank field."""
    for name, value in fields.items():
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationException(f"{name} is required", field=name)


class AccountService:
    """User accounts around the two-factor login gate.

    Args:
        user_repo: UserRepository (SQLAlchemy) for the current request session.
        two_factor: Two-factor gate used by login.
        notifier: Outbound email sender.
        renderer: Email template renderer.
        frontend_url: Base URL of the web client (login and reset-password links).
        backend_url: Base URL of this API (email verification link).
    """

    def __init__(
        self,
        user_repo: Any,
        two_factor: TwoFactorService,
        notifier: INotifier,
        renderer: ITemplateRenderer,
        *,
        frontend_url: str,
        backend_url: str,
    ) -> None:
        self._user_repo = user_repo
        self._two_factor = two_factor
        self._notifier = notifier
        self._renderer = renderer
        self._frontend_url = frontend_url.rstrip("/")
        self._backend_url = backend_url.rstrip("/")

    @property
    def login_url(self) -> str:
        return f"{self._frontend_url}/login"

    async def _send(self, to_email: str, template_key: str, context: dict[str, Any]) -> bool:
        subject, body = self._renderer.render(template_key, context)
        try:
            return await self._notifier.send(to_email, subject, body)
        except Exception:
            logger.exception("Email %s to %s raised", template_key, to_email)
            return False

    # ---- Registration and verification ----

    async def register(
        self, first_name: str, last_name: str, email: str, password: str
    ) -> UserResult:
        """Create an unverified user and email the verification link (fail-open).

        Raises:
            ValidationException: A field is blank.
            EmailAlreadyRegisteredException: Email already in use.
        """
        _require(
            first_name=first_name, last_name=last_name, email=email, password=password
        )
        token = generate_token()
        user = await self._user_repo.create_user(
            first_name.strip(), last_name.strip(), email, password, token
        )
        await self._user_repo.commit()
        link = f"{self._backend_url}/api/v1/auth/verify?token={token}"
        sent = await self._send(
            user.email, TEMPLATE_VERIFY_EMAIL, {"first_name": user.first_name, "link": link}
        )
        if not sent:
            logger.warning("Verification email for user %s not delivered", user.id)
        return self._user_repo.to_result(user)

    async def verify_email(self, token: str | None) -> UserResult:
        """Mark the token's user verified, clear the token, send a confirmation (fail-open).

        Raises:
            ValidationException: Token missing, unknown, or already used.
        """
        if not token:
            raise ValidationException("Verification token is required", field="token")
        user = await self._user_repo.get_by_verification_token(token)
        if user is None:
            raise ValidationException(
                "Invalid or expired verification token", field="token"
            )
        result = await self._user_repo.mark_verified(user)
        await self._user_repo.commit()
        await self._send(
            result.email, TEMPLATE_EMAIL_VERIFIED, {"first_name": result.first_name}
        )
        logger.info("User %s verified email", result.id)
        return result

    # ---- Login ----

    async def login(self, email: str, password: str) -> UserResult:
        """Check password and verification, then issue a two-factor challenge.

        Raises:
            AuthenticationException: Unknown email or wrong password.
            AccountNotVerifiedException: Email not yet verified.
        """
        _require(email=email, password=password)
        user = await self._user_repo.authenticate(email, password)
        if user is None:
            raise AuthenticationException("Invalid email or password")
        if not user.is_verified:
            raise AccountNotVerifiedException()
        result = self._user_repo.to_result(user)
        await self._two_factor.issue_challenge(result)
        return result

    # ---- Passwords ----

    async def forgot_password(self, email: str) -> None:
        """Store a reset token and email the reset link.

        Raises:
            ResourceNotFoundException: No user with that email.
            DependencyException: The reset email could not be sent.
        """
        _require(email=email)
        user = await self._user_repo.get_by_email(email)
        if user is None:
            raise ResourceNotFoundException("user", email)
        token = generate_token()
        await self._user_repo.set_reset_token(user, token)
        await self._user_repo.commit()
        link = f"{self._frontend_url}/reset-password?token={token}"
        if not await self._send(user.email, TEMPLATE_PASSWORD_RESET, {"link": link}):
            raise DependencyException("email")

    async def reset_password(self, token: str, new_password: str) -> None:
        """Set a new password for the reset token's user and clear the token.

        Raises:
            ValidationException: Missing fields or unknown token.
        """
        _require(token=token, new_password=new_password)
        user = await self._user_repo.get_by_reset_token(token)
        if user is None:
            raise ValidationException("Invalid or expired reset token", field="token")
        await self._user_repo.set_password(user, new_password)
        logger.info("Password reset for user %s", user.id)

    async def change_password(
        self, user_id: int, current_password: str, new_password: str
    ) -> None:
        """Replace the password after checking the current one.

        Raises:
            ValidationException: Missing fields.
            ResourceNotFoundException: Unknown user.
            AuthenticationException: Current password is wrong.
        """
        _require(current_password=current_password, new_password=new_password)
        user = await self._user_repo.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        if not await self._user_repo.check_password(user, current_password):
            raise AuthenticationException("Current password is incorrect")
        await self._user_repo.set_password(user, new_password)
        logger.info("Password changed for user %s", user_id)

    # ---- Profile ----

    async def get_user(self, user_id: int) -> UserResult:
        user = await self._user_repo.get_result(user_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        return user

    async def list_users(self) -> list[UserResult]:
        return await self._user_repo.list_results()

    async def update_profile(
        self, user_id: int, first_name: str, last_name: str, email: str
    ) -> UserResult:
        """Update name and email.

        Raises:
            ValidationException: A field is blank.
            ResourceNotFoundException: Unknown user.
            EmailAlreadyRegisteredException: Email belongs to another user.
        """
        _require(first_name=first_name, last_name=last_name, email=email)
        user = await self._user_repo.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        return await self._user_repo.update_profile(
            user, first_name.strip(), last_name.strip(), email
        )

    async def delete_user(self, user_id: int) -> None:
        user = await self._user_repo.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundException("user", user_id)
        await self._user_repo.delete(user)
