"""Auth API: registration, email verification, two-step login, passwords, current user.

Login is password first, then a six-digit code sent by email. The access
token is issued only by POST /verify-2fa.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from course_advising.api.v1.dependencies import (
    get_account_service,
    get_account_service_for_write,
    get_current_user,
    get_two_factor_service,
)
from course_advising.application.dtos.user import UserResult
from course_advising.application.services import AccountService, TwoFactorService
from course_advising.core.limiter import (
    limit_auth,
    limit_password_reset,
    limit_register,
    limit_two_factor,
)
from course_advising.domain.exceptions import ValidationException
from course_advising.infrastructure.security.jwt import create_user_token
from course_advising.schemas.auth import (
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    ResetPasswordRequest,
    StatusResponse,
    TwoFactorResendRequest,
    TwoFactorVerifyRequest,
    TwoFactorVerifyResponse,
)
from course_advising.schemas.user import UserResponse

router = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=201)
@limit_register
async def register(
    request: Request,
    body: RegisterRequest,
    accounts: AccountService = Depends(get_account_service_for_write),
):
    """Register a new (unverified) user and email the verification link."""
    user = await accounts.register(
        body.first_name, body.last_name, body.email, body.password
    )
    return UserResponse.model_validate(user)


@router.get("/verify", response_class=RedirectResponse, status_code=302)
async def verify_email(
    token: str | None = None,
    accounts: AccountService = Depends(get_account_service_for_write),
):
    """Confirm the email address from the link, then send the browser to the login page."""
    await accounts.verify_email(token)
    return RedirectResponse(url=accounts.login_url, status_code=302)


@router.post("/login", response_model=LoginResponse)
@limit_auth
async def login(
    request: Request,
    body: LoginRequest,
    accounts: AccountService = Depends(get_account_service),
):
    """Check email and password; on success a two-factor code is emailed.

    No token is returned here; finish with POST /auth/verify-2fa.
    """
    user = await accounts.login(body.email, body.password)
    return LoginResponse(user_id=user.id, email=user.email)


@router.post("/verify-2fa", response_model=TwoFactorVerifyResponse)
@limit_two_factor
async def verify_two_factor(
    request: Request,
    body: TwoFactorVerifyRequest,
    two_factor: TwoFactorService = Depends(get_two_factor_service),
):
    """Check the emailed code and return the user with an access token."""
    if body.user_id is None or not body.code:
        raise ValidationException("userId and code are required")
    user = await two_factor.verify_challenge(body.user_id, body.code)
    token = create_user_token(user.id, user.email, user.is_admin)
    return TwoFactorVerifyResponse(
        user=UserResponse.model_validate(user),
        access_token=token,
    )


@router.post("/resend-2fa", response_model=StatusResponse)
@limit_two_factor
async def resend_two_factor(
    request: Request,
    body: TwoFactorResendRequest,
    two_factor: TwoFactorService = Depends(get_two_factor_service),
):
    """Replace the pending code with a fresh one and email it."""
    if body.user_id is None:
        raise ValidationException("userId is required", field="user_id")
    await two_factor.resend_challenge(body.user_id)
    return StatusResponse(message="New 2FA code sent")


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: Annotated[UserResult, Depends(get_current_user)],
):
    """Return the currently authenticated user from JWT.

    Requires Authorization: Bearer <token>.
    """
    return UserResponse.model_validate(current_user)


@router.post("/forgot-password", response_model=StatusResponse)
@limit_password_reset
async def forgot_password(
    request: Request,
    body: ForgotPasswordRequest,
    accounts: AccountService = Depends(get_account_service_for_write),
):
    """Email a password reset link."""
    await accounts.forgot_password(body.email)
    return StatusResponse(message="Password reset email sent")


@router.post("/reset-password", response_model=StatusResponse)
@limit_password_reset
async def reset_password(
    request: Request,
    body: ResetPasswordRequest,
    accounts: AccountService = Depends(get_account_service_for_write),
):
    """Set a new password using the one-time token from the reset link."""
    await accounts.reset_password(body.token, body.new_password)
    return StatusResponse(message="Password has been reset successfully")


@router.post("/change-password/{user_id}", response_model=StatusResponse)
async def change_password(
    user_id: int,
    body: ChangePasswordRequest,
    accounts: AccountService = Depends(get_account_service_for_write),
):
    """Change a password after checking the current one."""
    await accounts.change_password(user_id, body.current_password, body.new_password)
    return StatusResponse(message="Password updated successfully")
