"""Transport layer components for the Waypoint HTTP client.

Transports wrap httpx's async transport to add behavior without touching
request logic. Requests are sent once: there is no retry layer.

Modules:
    error_logging: Error logging with null field detection, and the
        ``create_transport`` factory

Example:
    ```python
    from waypoint_templates.transport import create_transport

    transport = create_transport(verify=True)
    ```
"""

from waypoint_templates.transport.error_logging import ErrorLoggingTransport, create_transport

__all__ = ["ErrorLoggingTransport", "create_transport"]
