"""
Application error taxonomy.

Every error is an ``HTTPException`` so FastAPI renders it as
``{"detail": ...}`` with the right status code without extra handlers.
"""
from typing import Optional

from fastapi import HTTPException, status


class AppException(HTTPException):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Something went wrong"

    def __init__(self, detail: Optional[str] = None, headers: Optional[dict] = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.default_detail,
            headers=headers,
        )


class ValidationError(AppException):
    """Malformed or missing caller input."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"


class EmptyText(ValidationError):
    default_detail = "Comment text is required"


class MissingVideo(ValidationError):
    default_detail = "Video file is required"


class DuplicateEmail(ValidationError):
    # Reported as 400, not 409
    default_detail = "Email already registered"


class Unauthorized(AppException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Unauthorized"


class InvalidCredentials(Unauthorized):
    default_detail = "Invalid credentials"


class Forbidden(AppException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden"


class NotFound(AppException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class DependencyFailure(AppException):
    """The database or the media host could not serve the request."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Something went wrong"


class MediaHostFailure(DependencyFailure):
    default_detail = "Failed to upload video"
