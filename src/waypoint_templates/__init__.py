"""Waypoint Templates - command-line management of Waypoint project templates.

This package provides the pieces behind the ``waypoint-template`` command:
- An async HTTP client for the project template endpoints
- Multi-source resolution of server address and auth token
- Structured error handling with RFC 7807 support and humanized messages
- The fetch-then-update operation used by ``waypoint-template update``

Example:
    ```python
    import asyncio

    from waypoint_templates.client import ProjectTemplateClient
    from waypoint_templates.update import UpdateOptions, update_project_template


    async def main():
        async with ProjectTemplateClient(base_url="https://localhost:9702", token="...") as client:
            options = UpdateOptions(name="api", summary="HTTP API service", tags=("go", "http"))
            await update_project_template(client, options)


    asyncio.run(main())
    ```
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
