"""Domain exceptions for the course advising application.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class AdvisingAppException(Exception):
    """Base exception for all course advising application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON error body used by the API exception handler."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


# ---------------------------------------------------------------------------
# Validation (400)
# ---------------------------------------------------------------------------


class ValidationException(AdvisingAppException):
    """Raised when input validation fails (e.g. missing or malformed field)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class MissingOwnerException(AdvisingAppException):
    """Raised when an advising submission carries no owning user id."""

    def __init__(self) -> None:
        super().__init__("User ID is required", "MISSING_OWNER", {"field": "user_id"})


class MissingFieldsException(AdvisingAppException):
    """Raised when a review omits the decision, feedback message, or reviewer id."""

    def __init__(self, fields: list[str]) -> None:
        """Initialize with the names of the absent fields.

        Args:
            fields: Request fields that were missing.
        """
        super().__init__(
            "status, admin_message, and admin_id are required",
            "MISSING_FIELDS",
            {"fields": fields},
        )


class InvalidDecisionException(AdvisingAppException):
    """Raised when a review decision is not one of the terminal statuses."""

    def __init__(self, decision: str, allowed: list[str]) -> None:
        super().__init__(
            'status must be either "Approved" or "Rejected"',
            "INVALID_DECISION",
            {"status": decision, "allowed": allowed},
        )


class EmptyFeedbackException(AdvisingAppException):
    """Raised when the reviewer's feedback message is blank after trimming."""

    def __init__(self) -> None:
        super().__init__(
            "admin_message cannot be empty",
            "EMPTY_FEEDBACK",
            {"field": "admin_message"},
        )


# ---------------------------------------------------------------------------
# Not found (404)
# ---------------------------------------------------------------------------


class ResourceNotFoundException(AdvisingAppException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str | int) -> None:
        """Initialize with resource type and identifier.

        Args:
            resource_type: Kind of resource (e.g. 'user', 'advising_entry').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type.replace('_', ' ').capitalize()} not found",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": str(resource_id)},
        )


# ---------------------------------------------------------------------------
# Conflict (403 / 409)
# ---------------------------------------------------------------------------


class EmailAlreadyRegisteredException(AdvisingAppException):
    """Raised when registering or updating a user to an email already in use."""

    def __init__(self, email: str | None = None) -> None:
        super().__init__(
            "Email already registered",
            "EMAIL_ALREADY_REGISTERED",
            {"email": email} if email else {},
        )


class NotPendingException(AdvisingAppException):
    """Raised when editing an advising entry that has already been reviewed."""

    def __init__(self, entry_id: int, status: str) -> None:
        """Initialize with the entry id and its current status.

        Args:
            entry_id: The advising entry that was targeted.
            status: The entry's current (non-pending) status.
        """
        super().__init__(
            "Only pending entries can be edited",
            "NOT_PENDING",
            {"entry_id": entry_id, "status": status},
        )


class AlreadyReviewedException(AdvisingAppException):
    """Raised when a review loses the race: the entry left Pending before the update."""

    def __init__(self, entry_id: int, status: str | None = None) -> None:
        details: dict[str, Any] = {"entry_id": entry_id}
        if status:
            details["status"] = status
        super().__init__(
            "Advising entry has already been reviewed",
            "ALREADY_REVIEWED",
            details,
        )


# ---------------------------------------------------------------------------
# Authentication (401 / 403)
# ---------------------------------------------------------------------------


class AuthenticationException(AdvisingAppException):
    """Raised when authentication fails (e.g. invalid credentials or token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        """Initialize with optional message.

        Args:
            message: Description of the authentication failure.
        """
        super().__init__(message, "AUTHENTICATION_ERROR")


class AccountNotVerifiedException(AdvisingAppException):
    """Raised on login when the account's email address has not been verified."""

    def __init__(self) -> None:
        super().__init__(
            "Please verify your email before logging in",
            "ACCOUNT_NOT_VERIFIED",
        )


class NoPendingChallengeException(AdvisingAppException):
    """Raised when a 2FA code is submitted but no challenge exists for the user."""

    def __init__(self, user_id: int) -> None:
        super().__init__(
            "No 2FA request found or already verified",
            "NO_PENDING_CHALLENGE",
            {"user_id": user_id},
        )


class ChallengeExpiredException(AdvisingAppException):
    """Raised when a 2FA code is submitted after the challenge expired."""

    def __init__(self, user_id: int) -> None:
        super().__init__(
            "2FA code expired",
            "CHALLENGE_EXPIRED",
            {"user_id": user_id},
        )


class CodeMismatchException(AdvisingAppException):
    """Raised when the submitted 2FA code does not match the pending challenge."""

    def __init__(self, user_id: int) -> None:
        super().__init__(
            "Invalid 2FA code",
            "CODE_MISMATCH",
            {"user_id": user_id},
        )


# ---------------------------------------------------------------------------
# Dependencies (503)
# ---------------------------------------------------------------------------


class DependencyException(AdvisingAppException):
    """Raised when a required collaborator (storage, cache, email) fails.

    The client-facing message stays generic; the cause is kept in details
    for logging only.
    """

    def __init__(self, dependency: str, message: str = "Server error") -> None:
        super().__init__(message, "DEPENDENCY_ERROR", {"dependency": dependency})
