"""
Typed failures raised by the service layer.

Every failure is an ``HTTPException`` carrying a stable ``code`` so the API can
answer with a distinct user-facing message per kind:

    from tripmates.core.errors import Denied

    raise Denied()
    raise NotFound("Trip not found")
"""

from enum import StrEnum

from fastapi import HTTPException, status


class ErrorCode(StrEnum):
    unauthenticated = "unauthenticated"
    denied = "denied"
    not_found = "not_found"
    already_member = "already_member"
    duplicate_invitation = "duplicate_invitation"
    invalid_invitation = "invalid_invitation"
    invitation_expired = "invitation_expired"
    email_mismatch = "email_mismatch"
    invalid_payload = "invalid_payload"
    service_not_configured = "service_not_configured"
    operation_failed = "operation_failed"


USER_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.unauthenticated: "Please sign in to continue.",
    ErrorCode.denied: "You do not have permission to do that on this trip.",
    ErrorCode.not_found: "We could not find what you were looking for.",
    ErrorCode.already_member: "That person is already a member of this trip.",
    ErrorCode.duplicate_invitation: (
        "An invitation has already been sent to that email."
    ),
    ErrorCode.invalid_invitation: (
        "This invitation link is invalid or has already been used."
    ),
    ErrorCode.invitation_expired: "This invitation has expired. Ask for a new one.",
    ErrorCode.email_mismatch: "This invitation was sent to a different email address.",
    ErrorCode.invalid_payload: "Some of the information provided is not valid.",
    ErrorCode.service_not_configured: "This feature is not available right now.",
    ErrorCode.operation_failed: "The operation failed. Please try again.",
}


class TripmatesError(HTTPException):
    """Base class for every failure the services raise on purpose."""

    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: ErrorCode = ErrorCode.operation_failed

    def __init__(
        self,
        detail: str | None = None,
        *,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(
            status_code=self.http_status,
            detail=detail or self.user_message,
            headers=headers,
        )

    @property
    def user_message(self) -> str:
        return USER_MESSAGES.get(self.code, USER_MESSAGES[ErrorCode.operation_failed])


class Unauthenticated(TripmatesError):
    http_status = status.HTTP_401_UNAUTHORIZED
    code = ErrorCode.unauthenticated

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class Denied(TripmatesError):
    http_status = status.HTTP_403_FORBIDDEN
    code = ErrorCode.denied


class NotFound(TripmatesError):
    http_status = status.HTTP_404_NOT_FOUND
    code = ErrorCode.not_found


class AlreadyMember(TripmatesError):
    http_status = status.HTTP_409_CONFLICT
    code = ErrorCode.already_member


class DuplicateInvitation(TripmatesError):
    http_status = status.HTTP_409_CONFLICT
    code = ErrorCode.duplicate_invitation


class InvalidInvitation(TripmatesError):
    http_status = status.HTTP_400_BAD_REQUEST
    code = ErrorCode.invalid_invitation


class InvitationExpired(TripmatesError):
    http_status = status.HTTP_410_GONE
    code = ErrorCode.invitation_expired


class EmailMismatch(TripmatesError):
    http_status = status.HTTP_409_CONFLICT
    code = ErrorCode.email_mismatch


class InvalidPayload(TripmatesError):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = ErrorCode.invalid_payload


class ServiceNotConfigured(TripmatesError):
    code = ErrorCode.service_not_configured
