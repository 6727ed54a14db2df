"""Application error taxonomy.

Every error a service can raise on purpose derives from ``ContestHubError``,
which is an ``HTTPException`` so FastAPI turns it into a response by itself.
The ``code`` attribute is a stable machine-readable name for clients.
"""

from typing import Optional

from fastapi import HTTPException, status


class ContestHubError(HTTPException):
    """Base class for all expected request failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"
    default_detail: str = "Internal Server Error"

    def __init__(self, detail: Optional[str] = None, headers: Optional[dict] = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.default_detail,
            headers=headers,
        )


class ValidationError(ContestHubError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"
    default_detail = "Invalid request"


class Unauthorized(ContestHubError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"
    default_detail = "Invalid or expired token"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class InvalidCredentials(Unauthorized):
    """Raised for unknown emails and wrong passwords alike."""

    code = "invalid_credentials"
    default_detail = "Invalid credentials"


class Forbidden(ContestHubError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    default_detail = "Access denied"


class NotFound(ContestHubError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_detail = "Resource not found"


class Conflict(ContestHubError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"
    default_detail = "Resource already exists"


class DeadlinePassed(ContestHubError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "deadline_passed"
    default_detail = "Registration deadline has passed"


class Full(ContestHubError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "full"
    default_detail = "Team is full"


class WrongMode(ContestHubError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "wrong_mode"
    default_detail = "Operation does not match the contest participation mode"


class LeaderCannotLeave(ContestHubError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "leader_cannot_leave"
    default_detail = "Team leader cannot leave. Transfer leadership or delete the team."
