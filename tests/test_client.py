"""Tests for the project template client."""

import json

import httpx
import pytest

from waypoint_templates.client import ProjectTemplateClient
from waypoint_templates.config import ClientSettings
from waypoint_templates.errors import NotFoundError, ServerError, UnauthorizedError
from waypoint_templates.models import ProjectTemplateRef
from waypoint_templates.testing import create_error_response, create_mock_response
from waypoint_templates.transport import ErrorLoggingTransport


def _client(fake_service, **kwargs) -> ProjectTemplateClient:
    return ProjectTemplateClient(base_url="https://waypoint.test", transport=fake_service.transport(), **kwargs)


async def test_get_by_name(fake_service):
    """Test fetching a template by name."""
    async with _client(fake_service) as client:
        template = await client.get_project_template(ProjectTemplateRef.by_name("api"))

    assert template.id == "tmpl-1"
    assert template.name == "api"
    assert template.readme_markdown_template == b"# README"
    assert fake_service.get_requests[0].url.path == "/v1/project-templates/name/api"


async def test_get_by_id(fake_service):
    """Test fetching a template by id."""
    async with _client(fake_service) as client:
        template = await client.get_project_template(ProjectTemplateRef.by_id("tmpl-1"))

    assert template.name == "api"
    assert fake_service.get_requests[0].url.path == "/v1/project-templates/id/tmpl-1"


async def test_get_missing_template_raises_not_found(fake_service):
    async with _client(fake_service) as client:
        with pytest.raises(NotFoundError) as exc_info:
            await client.get_project_template(ProjectTemplateRef.by_name("nope"))

    assert exc_info.value.status_code == 404


async def test_get_empty_body_is_not_found():
    """Test a successful response without a template is treated as not found."""
    transport = httpx.MockTransport(lambda request: create_mock_response(200, {}))

    async with ProjectTemplateClient(base_url="https://waypoint.test", transport=transport) as client:
        with pytest.raises(NotFoundError):
            await client.get_project_template(ProjectTemplateRef.by_name("api"))


async def test_get_server_error(fake_service):
    fake_service.fail_get = create_error_response(500, "database unavailable", grpc_code=13)

    async with _client(fake_service) as client:
        with pytest.raises(ServerError, match="database unavailable"):
            await client.get_project_template(ProjectTemplateRef.by_name("api"))


async def test_update_sends_full_record(fake_service):
    """Test update sends every field as a PUT with the template wrapped."""
    async with _client(fake_service) as client:
        template = await client.get_project_template(ProjectTemplateRef.by_id("tmpl-1"))
        template.summary = "new"
        await client.update_project_template(template)

    request = fake_service.update_requests[0]
    assert request.url.path == "/v1/project-templates"
    body = json.loads(request.content)["projectTemplate"]
    assert body["summary"] == "new"
    assert body["expandedSummary"] == "old expanded"
    assert body["terraformNocodeModule"] == {"source": "acme/service/aws", "version": "1.0.0"}
    assert fake_service.templates["tmpl-1"]["summary"] == "new"


async def test_update_error(fake_service):
    fake_service.fail_update = create_error_response(401, "invalid token", grpc_code=16)

    async with _client(fake_service) as client:
        template = await client.get_project_template(ProjectTemplateRef.by_id("tmpl-1"))
        with pytest.raises(UnauthorizedError):
            await client.update_project_template(template)


async def test_token_sent_as_bearer(fake_service):
    async with _client(fake_service, token="s3cret") as client:
        await client.get_project_template(ProjectTemplateRef.by_id("tmpl-1"))

    assert fake_service.requests[0].headers["Authorization"] == "Bearer s3cret"


async def test_no_token_no_authorization_header(fake_service):
    async with _client(fake_service) as client:
        await client.get_project_template(ProjectTemplateRef.by_id("tmpl-1"))

    assert "Authorization" not in fake_service.requests[0].headers


async def test_from_settings(fake_service):
    """Test a client built from settings uses the address, token and error logging."""
    settings = ClientSettings(address="https://waypoint.internal:9702", token="s3cret", timeout=5.0)

    client = ProjectTemplateClient.from_settings(settings, transport=fake_service.transport())
    assert isinstance(client._http._transport, ErrorLoggingTransport)

    async with client:
        await client.get_project_template(ProjectTemplateRef.by_id("tmpl-1"))

    request = fake_service.requests[0]
    assert str(request.url) == "https://waypoint.internal:9702/v1/project-templates/id/tmpl-1"
    assert request.headers["Authorization"] == "Bearer s3cret"
