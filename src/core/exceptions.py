"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_REFRESH_TOKEN = "INVALID_REFRESH_TOKEN"
    USER_NOT_FOUND = "USER_NOT_FOUND"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"
    NOT_A_MEMBER = "NOT_A_MEMBER"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"

    # Not found errors (404)
    WORKSPACE_NOT_FOUND = "WORKSPACE_NOT_FOUND"
    MEMBER_NOT_FOUND = "MEMBER_NOT_FOUND"
    CARD_NOT_FOUND = "CARD_NOT_FOUND"
    TRANSACTION_NOT_FOUND = "TRANSACTION_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    WORKSPACE_ID_REQUIRED = "WORKSPACE_ID_REQUIRED"
    WORKSPACE_ALREADY_EXISTS = "WORKSPACE_ALREADY_EXISTS"
    CANNOT_REMOVE_OWNER = "CANNOT_REMOVE_OWNER"
    INVALID_CARD = "INVALID_CARD"

    # Invitation errors
    INVITATION_NOT_FOUND = "INVITATION_NOT_FOUND"
    INVITATION_EXPIRED = "INVITATION_EXPIRED"
    INVITATION_NOT_PENDING = "INVITATION_NOT_PENDING"
    DUPLICATE_INVITATION = "DUPLICATE_INVITATION"
    INVITATION_EMAIL_MISMATCH = "INVITATION_EMAIL_MISMATCH"

    # Conflict errors (409)
    EMAIL_ALREADY_REGISTERED = "EMAIL_ALREADY_REGISTERED"
    ALREADY_A_MEMBER = "ALREADY_A_MEMBER"
    CONFLICT = "CONFLICT"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class InvalidCredentialsError(AuthenticationError):
    """Email/password combination rejected.

    Unknown email, OAuth-only account and wrong password are deliberately
    indistinguishable.
    """

    def __init__(self) -> None:
        super().__init__(
            message="Invalid credentials",
            error_code=ErrorCode.INVALID_CREDENTIALS,
        )


class InvalidRefreshTokenError(AuthenticationError):
    """Refresh token absent, unknown, expired or already consumed."""

    def __init__(self, message: str = "Invalid refresh token") -> None:
        super().__init__(
            message=message,
            error_code=ErrorCode.INVALID_REFRESH_TOKEN,
        )


class AuthorizationError(AppException):
    """Authorization failed."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(
            error_code=ErrorCode.FORBIDDEN,
            message=message,
            status_code=403,
        )


class EmailAlreadyRegisteredError(AppException):
    """An account already exists for this email."""

    def __init__(self, email: str) -> None:
        super().__init__(
            error_code=ErrorCode.EMAIL_ALREADY_REGISTERED,
            message="Email already registered",
            status_code=409,
            details={"email": email},
        )


class WorkspaceIdRequiredError(AppException):
    """A workspace-scoped request did not name a workspace."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.WORKSPACE_ID_REQUIRED,
            message="Workspace ID required",
            status_code=400,
        )


class WorkspaceNotFoundError(AppException):
    """Workspace not found."""

    def __init__(self, workspace_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.WORKSPACE_NOT_FOUND,
            message=f"Workspace not found: {workspace_id}",
            status_code=404,
            details={"workspace_id": workspace_id},
        )


class WorkspaceAlreadyExistsError(AppException):
    """The user already belongs to a workspace and cannot onboard again."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.WORKSPACE_ALREADY_EXISTS,
            message="User already has a workspace",
            status_code=400,
        )


class WorkspaceTypeChangeError(AppException):
    """A partnership cannot go back to being a sole trader."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message="A partnership cannot be changed back to a sole trader",
            status_code=400,
        )


class NotAMemberError(AppException):
    """User is not a member of the workspace."""

    def __init__(self, workspace_id: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.NOT_A_MEMBER,
            message="Access denied to this workspace",
            status_code=403,
            details={"workspace_id": workspace_id} if workspace_id else None,
        )


class InsufficientPermissionsError(AppException):
    """User's role is outside the allowed set."""

    def __init__(self, allowed_roles: list[str] | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.INSUFFICIENT_PERMISSIONS,
            message="Insufficient permissions",
            status_code=403,
            details={"allowed_roles": allowed_roles} if allowed_roles else None,
        )


class MemberNotFoundError(AppException):
    """Workspace member not found."""

    def __init__(self, member_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.MEMBER_NOT_FOUND,
            message="Member not found",
            status_code=404,
            details={"member_id": member_id},
        )


class CannotRemoveOwnerError(AppException):
    """The owning member of a workspace can never be removed."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.CANNOT_REMOVE_OWNER,
            message="Cannot remove workspace owner",
            status_code=400,
        )


class AlreadyAMemberError(AppException):
    """User is already a member of the workspace."""

    def __init__(self, email: str) -> None:
        super().__init__(
            error_code=ErrorCode.ALREADY_A_MEMBER,
            message="User is already a member of this workspace",
            status_code=409,
            details={"email": email},
        )


class CardNotFoundError(AppException):
    """Card not found in the workspace."""

    def __init__(self, card_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.CARD_NOT_FOUND,
            message="Card not found",
            status_code=404,
            details={"card_id": card_id},
        )


class InvalidCardError(AppException):
    """Card is missing, inactive or belongs to another workspace."""

    def __init__(self, card_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_CARD,
            message="Invalid or inactive card",
            status_code=400,
            details={"card_id": card_id},
        )


class TransactionNotFoundError(AppException):
    """Transaction not found in the workspace."""

    def __init__(self, transaction_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.TRANSACTION_NOT_FOUND,
            message="Transaction not found",
            status_code=404,
            details={"transaction_id": transaction_id},
        )


class InvitationNotFoundError(AppException):
    """Invitation not found."""

    def __init__(self, invitation_id: str = "") -> None:
        super().__init__(
            error_code=ErrorCode.INVITATION_NOT_FOUND,
            message="Invitation not found",
            status_code=404,
            details={"invitation_id": invitation_id} if invitation_id else None,
        )


class InvitationExpiredError(AppException):
    """Invitation has expired."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.INVITATION_EXPIRED,
            message="This invitation has expired",
            status_code=400,
        )


class InvitationNotPendingError(AppException):
    """Invitation is in a terminal state."""

    def __init__(self, status: str) -> None:
        super().__init__(
            error_code=ErrorCode.INVITATION_NOT_PENDING,
            message=f"Invitation is {status.lower()}",
            status_code=400,
            details={"status": status},
        )


class DuplicateInvitationError(AppException):
    """A pending invitation already exists for this email and workspace."""

    def __init__(self, email: str) -> None:
        super().__init__(
            error_code=ErrorCode.DUPLICATE_INVITATION,
            message="A pending invitation already exists for this email",
            status_code=409,
            details={"email": email},
        )


class InvitationEmailMismatchError(AppException):
    """The user's email does not match the invitation email."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.INVITATION_EMAIL_MISMATCH,
            message="This invitation was sent to a different email address",
            status_code=403,
        )
