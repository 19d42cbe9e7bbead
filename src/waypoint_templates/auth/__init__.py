"""Authentication and settings resolution for the Waypoint server.

- Multi-source resolution (option → env → .env → default)
- Bearer token authentication

Example:
    ```python
    from waypoint_templates.auth import BearerAuth, CredentialResolver

    resolver = CredentialResolver()
    token = resolver.resolve(env_var_name="WAYPOINT_SERVER_TOKEN")
    auth = BearerAuth(token)
    ```
"""

from waypoint_templates.auth.bearer import BearerAuth
from waypoint_templates.auth.credentials import CredentialResolver
from waypoint_templates.auth.exceptions import CredentialError, CredentialFileError

__all__ = [
    "BearerAuth",
    "CredentialError",
    "CredentialFileError",
    "CredentialResolver",
]
