"""Structured exceptions for API and command errors."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from waypoint_templates.errors.models import ProblemDetail


class APIError(Exception):
    """Base exception for API errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: "httpx.Response | None" = None,
        problem_detail: "ProblemDetail | None" = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response = response
        self.problem_detail = problem_detail


class ClientError(APIError):
    """4xx client errors."""

    pass


class BadRequestError(ClientError):
    """400 Bad Request."""

    pass


class UnauthorizedError(ClientError):
    """401 Unauthorized."""

    pass


class ForbiddenError(ClientError):
    """403 Forbidden."""

    pass


class NotFoundError(ClientError):
    """404 Not Found, or a lookup that returned no project template."""

    pass


class ConflictError(ClientError):
    """409 Conflict."""

    pass


class ServerError(APIError):
    """5xx server errors."""

    pass


class ValidationError(Exception):
    """Raised when command options are missing or inconsistent.

    These errors are detected locally, before any update is sent, and are
    reported together with the command usage text.
    """

    pass


class SettingsError(Exception):
    """Raised when a connection setting from the environment is unusable."""

    pass


class RemoteError(Exception):
    """Raised when a call to the Waypoint server fails for any reason other than not-found.

    Attributes:
        status_code: HTTP status code of the failed call, if a response was received.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class FileReadError(Exception):
    """Raised when a local template file is missing or cannot be read.

    Attributes:
        path: The path that could not be read.
    """

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.path = path
