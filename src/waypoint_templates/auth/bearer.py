"""Bearer token authentication for the Waypoint HTTP gateway."""

from collections.abc import Generator

import httpx


class BearerAuth(httpx.Auth):
    """Attach ``Authorization: Bearer <token>`` to every request.

    Example:
        ```python
        async with httpx.AsyncClient(auth=BearerAuth(token)) as client:
            ...
        ```
    """

    def __init__(self, token: str):
        self._token = token

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = f"Bearer {self._token}"
        yield request

    def __repr__(self) -> str:
        return "BearerAuth(token=***)"
