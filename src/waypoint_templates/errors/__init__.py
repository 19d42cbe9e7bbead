"""Error handling for the Waypoint template client and commands.

Two families live here:

- HTTP errors (``APIError`` and subclasses), raised by ``raise_for_status``
  from server responses.
- Command errors (``ValidationError``, ``SettingsError``, ``RemoteError``,
  ``FileReadError``), raised by the update operation and rendered by the
  CLI. ``NotFoundError`` belongs to both: it is the 404 error and the
  "template does not exist" outcome of a lookup.
"""

from waypoint_templates.errors.exceptions import (
    APIError,
    BadRequestError,
    ClientError,
    ConflictError,
    FileReadError,
    ForbiddenError,
    NotFoundError,
    RemoteError,
    ServerError,
    SettingsError,
    UnauthorizedError,
    ValidationError,
)
from waypoint_templates.errors.handler import detect_null_fields, humanize, raise_for_status
from waypoint_templates.errors.models import ProblemDetail

__all__ = [
    "APIError",
    "BadRequestError",
    "ClientError",
    "ConflictError",
    "FileReadError",
    "ForbiddenError",
    "NotFoundError",
    "ProblemDetail",
    "RemoteError",
    "ServerError",
    "SettingsError",
    "UnauthorizedError",
    "ValidationError",
    "detect_null_fields",
    "humanize",
    "raise_for_status",
]
