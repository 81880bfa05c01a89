"""Auth API schemas."""

from pydantic import AliasChoices, BaseModel, EmailStr, Field, field_validator

from course_advising.schemas.user import UserResponse


class RegisterRequest(BaseModel):
    """Request body for public registration. The account starts unverified."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr = Field(...)
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")


class LoginRequest(BaseModel):
    """Request body for the password step of login."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Password accepted; a two-factor code was sent. No token yet."""

    status: str = "2fa_required"
    message: str = "2FA code sent"
    user_id: int
    email: str


class TwoFactorVerifyRequest(BaseModel):
    """Request body for POST /auth/verify-2fa. Missing fields are a 400, not a 422.

    The code may arrive as a JSON number; it is compared as the decimal string.
    """

    user_id: int | None = Field(
        default=None, validation_alias=AliasChoices("user_id", "userId")
    )
    code: str | None = None

    @field_validator("code", mode="before")
    @classmethod
    def code_as_string(cls, v: object) -> object:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class TwoFactorResendRequest(BaseModel):
    """Request body for POST /auth/resend-2fa."""

    user_id: int | None = Field(
        default=None, validation_alias=AliasChoices("user_id", "userId")
    )


class TwoFactorVerifyResponse(BaseModel):
    """Second factor accepted: the user record plus a bearer token."""

    status: str = "success"
    message: str = "2FA verified"
    user: UserResponse
    access_token: str
    token_type: str = "bearer"


class ForgotPasswordRequest(BaseModel):
    email: str = Field(..., min_length=1)


class ResetPasswordRequest(BaseModel):
    """Request body for POST /auth/reset-password (token from the emailed link)."""

    token: str = Field(..., min_length=1, description="One-time token from reset link")
    new_password: str = Field(..., min_length=8, description="New password (min 8 characters)")


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, description="New password (min 8 characters)")


class StatusResponse(BaseModel):
    """Generic acknowledgement."""

    status: str = "success"
    message: str | None = None
