"""Testing utilities for code that talks to the project template endpoints.

Provides an in-memory fake of the Waypoint project template API that plugs
into ``httpx.MockTransport`` and records every request, plus small response
factories.

Example:
    ```python
    from waypoint_templates.testing import FakeTemplateService


    async def test_update(fake_service):
        fake_service.add({"id": "tmpl-1", "name": "api", "tags": ["a"]})
        client = ProjectTemplateClient(base_url="https://waypoint.test", transport=fake_service.transport())
        async with client:
            ...
        assert len(fake_service.update_requests) == 1
    ```
"""

import json
from typing import Any
from urllib.parse import unquote

import httpx

TEMPLATES_PATH = "/v1/project-templates"


def create_mock_response(status_code: int = 200, json_data: Any = None, **kwargs: Any) -> httpx.Response:
    """Build a JSON response."""
    if json_data is None:
        return httpx.Response(status_code, **kwargs)
    return httpx.Response(status_code, json=json_data, **kwargs)


def create_error_response(status_code: int, message: str, grpc_code: int = 2) -> httpx.Response:
    """Build an error response shaped like a grpc-gateway status body."""
    return httpx.Response(status_code, json={"code": grpc_code, "message": message, "details": []})


class FakeTemplateService:
    """In-memory stand-in for the Waypoint server's project template endpoints.

    Templates are stored as their JSON dicts. Failures can be forced per
    operation with ``fail_get`` / ``fail_update``, which take either an
    ``httpx.Response`` to return or an exception to raise.

    Attributes:
        templates: Stored templates keyed by id.
        requests: Every request received, in order.
    """

    def __init__(self) -> None:
        self.templates: dict[str, dict[str, Any]] = {}
        self.requests: list[httpx.Request] = []
        self.fail_get: httpx.Response | Exception | None = None
        self.fail_update: httpx.Response | Exception | None = None

    def add(self, template: dict[str, Any]) -> dict[str, Any]:
        self.templates[template["id"]] = dict(template)
        return self.templates[template["id"]]

    @property
    def get_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "GET"]

    @property
    def update_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "PUT"]

    def updated_bodies(self) -> list[dict[str, Any]]:
        """The ``projectTemplate`` payload of every update request."""
        return [json.loads(r.content)["projectTemplate"] for r in self.update_requests]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        path = request.url.path
        if request.method == "GET" and path.startswith(f"{TEMPLATES_PATH}/"):
            return self._get(path[len(TEMPLATES_PATH) + 1 :])
        if request.method == "PUT" and path == TEMPLATES_PATH:
            return self._update(request)
        return create_error_response(404, f"no route for {request.method} {path}", grpc_code=12)

    def _failure(self, failure: httpx.Response | Exception) -> httpx.Response:
        if isinstance(failure, Exception):
            raise failure
        return failure

    def _find(self, kind: str, value: str) -> dict[str, Any] | None:
        if kind == "id":
            return self.templates.get(value)
        return next((t for t in self.templates.values() if t.get("name") == value), None)

    def _get(self, selector: str) -> httpx.Response:
        if self.fail_get is not None:
            return self._failure(self.fail_get)

        kind, _, value = selector.partition("/")
        template = self._find(kind, unquote(value))
        if template is None:
            return create_error_response(404, f"project template not found: {value}", grpc_code=5)
        return create_mock_response(200, {"projectTemplate": template})

    def _update(self, request: httpx.Request) -> httpx.Response:
        if self.fail_update is not None:
            return self._failure(self.fail_update)

        template = json.loads(request.content)["projectTemplate"]
        if template.get("id") not in self.templates:
            return create_error_response(404, "project template not found", grpc_code=5)
        self.templates[template["id"]] = template
        return create_mock_response(200, {})


__all__ = ["FakeTemplateService", "create_error_response", "create_mock_response"]
