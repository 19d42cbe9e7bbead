"""Error handling utilities for HTTP responses."""

from typing import Any

import httpx

from waypoint_templates.errors.exceptions import (
    APIError,
    BadRequestError,
    ClientError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ServerError,
    UnauthorizedError,
)
from waypoint_templates.errors.models import ProblemDetail


def raise_for_status(response: httpx.Response) -> None:
    """Raise appropriate exception for HTTP error responses.

    Parses RFC 7807 problem details or grpc-gateway status bodies if present,
    otherwise uses standard HTTP status code to exception mapping.

    Args:
        response: HTTP response object

    Raises:
        APIError subclass based on status code
    """
    if response.is_success:
        return

    problem_detail = ProblemDetail.from_response(response)

    status_code = response.status_code

    exception_map = {
        400: BadRequestError,
        401: UnauthorizedError,
        403: ForbiddenError,
        404: NotFoundError,
        409: ConflictError,
    }

    if status_code in exception_map:
        exc_class = exception_map[status_code]
    elif 400 <= status_code < 500:
        exc_class = ClientError
    elif 500 <= status_code < 600:
        exc_class = ServerError
    else:
        exc_class = APIError

    if problem_detail:
        message = problem_detail.to_exception_message()
    else:
        response_text = response.text[:200]
        message = f"HTTP {status_code}: {response_text}" if response_text else f"HTTP {status_code}"

    raise exc_class(
        message=message,
        status_code=status_code,
        response=response,
        problem_detail=problem_detail,
    )


def detect_null_fields(data: dict[str, Any] | list, path: str = "") -> list[str]:
    """Detect null fields in API response data.

    Recursively scans response data for null values and returns paths.

    Args:
        data: Response data (dict or list)
        path: Current path (for recursion)

    Returns:
        List of field paths that contain null values
    """
    null_paths = []

    if isinstance(data, dict):
        for key, value in data.items():
            current_path = f"{path}.{key}" if path else key

            if value is None:
                null_paths.append(current_path)
            elif isinstance(value, (dict, list)):
                null_paths.extend(detect_null_fields(value, current_path))

    elif isinstance(data, list):
        for index, item in enumerate(data):
            current_path = f"{path}[{index}]"

            if item is None:
                null_paths.append(current_path)
            elif isinstance(item, (dict, list)):
                null_paths.extend(detect_null_fields(item, current_path))

    return null_paths


def humanize(error: BaseException) -> str:
    """Turn an exception into a single message suitable for end users.

    API errors prefer the problem-detail title and detail over the raw
    response text. Transport failures get a short description of what went
    wrong instead of the underlying library message.

    Args:
        error: Any exception raised while talking to the server or the filesystem.

    Returns:
        Human-readable message.
    """
    if isinstance(error, APIError):
        problem = error.problem_detail
        if problem is not None and (problem.title or problem.detail):
            parts = [p for p in (problem.title, problem.detail) if p]
            if len(parts) == 2 and parts[0] == parts[1]:
                parts = parts[:1]
            return ": ".join(parts)
        return str(error)

    if isinstance(error, httpx.TimeoutException):
        return "The request to the server timed out"

    if isinstance(error, httpx.ConnectError):
        message = "Unable to connect to the server"
        url = _request_url(error)
        if url:
            message += f" at {url}"
        return f"{message}: {error}" if str(error) else message

    if isinstance(error, httpx.HTTPError):
        return str(error) or type(error).__name__

    if isinstance(error, OSError) and error.strerror:
        return error.strerror

    return str(error) or type(error).__name__


def _request_url(error: httpx.HTTPError) -> str | None:
    # httpx raises RuntimeError from .request when no request is attached
    try:
        request = error.request
    except RuntimeError:
        return None
    return f"{request.url.scheme}://{request.url.netloc.decode()}"
