"""Error logging transport for the Waypoint HTTP client.

Wraps another async transport and logs, without altering, what comes back:

- 4xx/5xx responses are logged at WARNING with the parsed error body
- successful JSON responses are scanned for null fields, logged at DEBUG

```python
import httpx

from waypoint_templates.transport.error_logging import ErrorLoggingTransport

transport = ErrorLoggingTransport(wrapped_transport=httpx.AsyncHTTPTransport())

async with httpx.AsyncClient(transport=transport) as client:
    response = await client.get("https://localhost:9702/v1/project-templates/name/api")
```
"""

import json
import logging

import httpx

from waypoint_templates.errors.handler import detect_null_fields
from waypoint_templates.errors.models import ProblemDetail

logger = logging.getLogger(__name__)


class ErrorLoggingTransport(httpx.AsyncBaseTransport):
    """Transport that logs error responses and null fields in response bodies.

    Args:
        wrapped_transport: The underlying transport to wrap
    """

    def __init__(self, *, wrapped_transport: httpx.AsyncBaseTransport) -> None:
        self._wrapped_transport = wrapped_transport

    async def __aenter__(self):
        """Enter async context, delegating to wrapped transport."""
        await self._wrapped_transport.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context, delegating to wrapped transport."""
        return await self._wrapped_transport.__aexit__(exc_type, exc_val, exc_tb)

    async def aclose(self) -> None:
        await self._wrapped_transport.aclose()

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Send the request and log the outcome.

        Args:
            request: The HTTP request to send

        Returns:
            The wrapped transport's response, with its body already read
        """
        try:
            response = await self._wrapped_transport.handle_async_request(request)
        except httpx.TransportError as e:
            logger.warning(f"Request {request.method} {request.url} failed: {e!r}")
            raise

        # Read once so the body can be inspected here and consumed by the client
        await response.aread()

        if response.is_error:
            self._log_error_response(request, response)
        elif logger.isEnabledFor(logging.DEBUG):
            self._log_null_fields(request, response)

        return response

    def _log_error_response(self, request: httpx.Request, response: httpx.Response) -> None:
        problem = ProblemDetail.from_response(response)
        if problem is not None:
            detail = problem.to_exception_message().replace("\n", "; ")
        else:
            detail = response.text[:200] or "<empty body>"
        logger.warning(f"Request {request.method} {request.url} returned {response.status_code}: {detail}")

    def _log_null_fields(self, request: httpx.Request, response: httpx.Response) -> None:
        if "json" not in response.headers.get("content-type", ""):
            return
        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.debug(f"Response to {request.method} {request.url} is not valid JSON")
            return
        if not isinstance(data, (dict, list)):
            return

        null_fields = detect_null_fields(data)
        if null_fields:
            logger.debug(
                f"Response to {request.method} {request.url} has null fields: {', '.join(null_fields)}"
            )


def create_transport(
    *,
    verify: bool = True,
    wrapped_transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncBaseTransport:
    """Build the transport stack used by the Waypoint client.

    Args:
        verify: Whether to verify the server's TLS certificate
        wrapped_transport: Innermost transport; defaults to a real HTTP
            transport. Tests pass an ``httpx.MockTransport`` here.

    Returns:
        Transport to hand to ``httpx.AsyncClient``
    """
    transport = wrapped_transport or httpx.AsyncHTTPTransport(verify=verify)
    return ErrorLoggingTransport(wrapped_transport=transport)
