"""
Error taxonomy shared by stores, services and routes.

Every failure a request can end in is one of these classes. Routes translate them to
`HTTPException` using `status_code`; nothing in the core retries them.
"""

from typing import Optional


class BlogPlatformError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(BlogPlatformError):
    """Malformed or missing input. Carries the first field that failed."""

    status_code = 400

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class ConflictError(BlogPlatformError):
    """Uniqueness violation or sign-in through the wrong auth method."""

    status_code = 409


class AuthError(BlogPlatformError):
    """Bad credentials (401) or an invalid session token (403)."""

    status_code = 401


class NotFoundError(BlogPlatformError):
    """Referenced user or blog does not exist."""

    status_code = 404


class DependencyError(BlogPlatformError):
    """The database or an external collaborator failed."""

    status_code = 500
