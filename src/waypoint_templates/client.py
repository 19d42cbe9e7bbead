"""Async client for the Waypoint project template endpoints."""

import logging
from types import TracebackType

import httpx

from waypoint_templates.auth import BearerAuth
from waypoint_templates.config import ClientSettings
from waypoint_templates.errors import NotFoundError, raise_for_status
from waypoint_templates.models import ProjectTemplate, ProjectTemplateRef
from waypoint_templates.transport import create_transport

logger = logging.getLogger(__name__)

TEMPLATES_PATH = "/v1/project-templates"


class ProjectTemplateClient:
    """Client for reading and replacing project templates.

    One instance wraps one ``httpx.AsyncClient`` and is meant to be used as
    an async context manager for the duration of a single command.

    Raises from every call:
        APIError subclasses for HTTP error statuses
        httpx.HTTPError for transport failures

    Example:
        ```python
        async with ProjectTemplateClient(base_url="https://localhost:9702", token=token) as client:
            template = await client.get_project_template(ProjectTemplateRef.by_name("api"))
            template.summary = "HTTP API service"
            await client.update_project_template(template)
        ```
    """

    def __init__(
        self,
        *,
        base_url: str,
        token: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._http = httpx.AsyncClient(
            base_url=base_url,
            auth=BearerAuth(token) if token else None,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "ProjectTemplateClient":
        """Build a client from resolved settings.

        ``transport`` replaces the real network transport; error logging is
        layered on top either way.
        """
        return cls(
            base_url=settings.address,
            token=settings.token,
            timeout=settings.timeout,
            transport=create_transport(verify=not settings.tls_skip_verify, wrapped_transport=transport),
        )

    async def __aenter__(self) -> "ProjectTemplateClient":
        await self._http.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self._http.__aexit__(exc_type, exc_val, exc_tb)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def get_project_template(self, ref: ProjectTemplateRef) -> ProjectTemplate:
        """Fetch the current state of a project template.

        Args:
            ref: Which template to fetch.

        Returns:
            The full template record.

        Raises:
            NotFoundError: The server has no such template, or answered
                without a template body.
        """
        logger.debug(f"Fetching project template {ref}")
        response = await self._http.get(f"{TEMPLATES_PATH}/{ref.path}")
        raise_for_status(response)

        data = response.json()
        body = data.get("projectTemplate") if isinstance(data, dict) else None
        if not body:
            raise NotFoundError(
                f"No project template in response for {ref}",
                status_code=response.status_code,
                response=response,
            )
        return ProjectTemplate.from_dict(body)

    async def update_project_template(self, template: ProjectTemplate) -> None:
        """Replace a project template with ``template``.

        Every field is sent; the server overwrites the stored record.
        """
        logger.debug(f"Updating project template id={template.id!r} name={template.name!r}")
        response = await self._http.put(TEMPLATES_PATH, json={"projectTemplate": template.to_dict()})
        raise_for_status(response)
