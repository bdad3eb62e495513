"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"
    NOT_A_MEMBER = "NOT_A_MEMBER"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"

    # Not found errors (404)
    ALBUM_NOT_FOUND = "ALBUM_NOT_FOUND"
    MEMBER_NOT_FOUND = "MEMBER_NOT_FOUND"
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    INVITATION_NOT_FOUND = "INVITATION_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Invitation errors
    INVALID_OR_EXPIRED_INVITATION = "INVALID_OR_EXPIRED_INVITATION"
    MAX_USES_REACHED = "MAX_USES_REACHED"
    INVITATION_EMAIL_MISMATCH = "INVITATION_EMAIL_MISMATCH"
    INVITE_QUOTA_EXCEEDED = "INVITE_QUOTA_EXCEEDED"

    # Conflict errors (409)
    ALREADY_A_MEMBER = "ALREADY_A_MEMBER"
    DUPLICATE_INVITATION = "DUPLICATE_INVITATION"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (5xx)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    STORE_FAILURE = "STORE_FAILURE"


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


class InvalidInputError(AppException):
    """A service argument failed validation."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details={"field": field} if field else None,
        )


class AlbumNotFoundError(AppException):
    """Album not found."""

    def __init__(self, album_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.ALBUM_NOT_FOUND,
            message=f"Album not found: {album_id}",
            status_code=404,
            details={"album_id": album_id},
        )


class MemberNotFoundError(AppException):
    """Album membership not found."""

    def __init__(self, member_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.MEMBER_NOT_FOUND,
            message=f"Album member not found: {member_id}",
            status_code=404,
            details={"member_id": member_id},
        )


class ProfileNotFoundError(AppException):
    """User profile not found."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message=f"User not found: {user_id}",
            status_code=404,
            details={"user_id": user_id},
        )


class NotAMemberError(AppException):
    """Caller has no relation to the album."""

    def __init__(self, album_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.NOT_A_MEMBER,
            message="You do not have access to this album",
            status_code=403,
            details={"album_id": album_id},
        )


class InsufficientPermissionsError(AppException):
    """Caller has a role on the album, but it lacks the required capability."""

    def __init__(self, required: str = "admin", message: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.INSUFFICIENT_PERMISSIONS,
            message=message or f"Insufficient permissions. Required: {required}",
            status_code=403,
            details={"required": required},
        )


class AlreadyAMemberError(AppException):
    """User is already a member of the album."""

    def __init__(self, user_id: str = "") -> None:
        super().__init__(
            error_code=ErrorCode.ALREADY_A_MEMBER,
            message="This user is already a member of the album",
            status_code=409,
            details={"user_id": user_id} if user_id else None,
        )


class DuplicateInvitationError(AppException):
    """An active email invitation already exists for this email and album."""

    def __init__(self, email: str) -> None:
        super().__init__(
            error_code=ErrorCode.DUPLICATE_INVITATION,
            message="An invitation has already been sent to this email",
            status_code=409,
            details={"email": email},
        )


class InviteQuotaExceededError(AppException):
    """Album has too many active shareable invitations."""

    def __init__(self, limit: int) -> None:
        super().__init__(
            error_code=ErrorCode.INVITE_QUOTA_EXCEEDED,
            message=(
                f"Maximum number of active shareable invites reached ({limit}). "
                "Please revoke some existing invites."
            ),
            status_code=429,
            details={"limit": limit},
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


class InvalidOrExpiredInvitationError(AppException):
    """Invitation token is unknown, already used, revoked, or past its expiry."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_OR_EXPIRED_INVITATION,
            message="Invalid or expired invite",
            status_code=410,
        )


class MaxUsesReachedError(AppException):
    """Shareable invitation has no uses left."""

    def __init__(self, max_uses: int | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.MAX_USES_REACHED,
            message="This invite link has reached its maximum number of uses",
            status_code=410,
            details={"max_uses": max_uses} if max_uses is not None else None,
        )


class InvitationEmailMismatchError(AppException):
    """The caller's email does not match the invitation email."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.INVITATION_EMAIL_MISMATCH,
            message="This invite is for a different email address",
            status_code=403,
        )


class StoreFailureError(AppException):
    """The data store rejected or failed an operation."""

    def __init__(self, message: str = "Data store operation failed") -> None:
        super().__init__(
            error_code=ErrorCode.STORE_FAILURE,
            message=message,
            status_code=503,
        )


class NotificationDeliveryError(Exception):
    """Outbound invitation notice could not be delivered."""
