"""Connection settings for the Waypoint server."""

import logging
from dataclasses import dataclass

from waypoint_templates.auth import CredentialError, CredentialResolver
from waypoint_templates.errors import SettingsError

logger = logging.getLogger(__name__)

ADDRESS_ENV = "WAYPOINT_SERVER_ADDR"
TOKEN_ENV = "WAYPOINT_SERVER_TOKEN"
TOKEN_FILE_ENV = "WAYPOINT_SERVER_TOKEN_FILE"
TIMEOUT_ENV = "WAYPOINT_CLIENT_TIMEOUT"
TLS_SKIP_VERIFY_ENV = "WAYPOINT_SERVER_TLS_SKIP_VERIFY"

DEFAULT_ADDRESS = "https://localhost:9702"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class ClientSettings:
    """Everything needed to open a connection to the Waypoint server."""

    address: str = DEFAULT_ADDRESS
    token: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    tls_skip_verify: bool = False

    def __repr__(self) -> str:
        token = "***" if self.token else None
        return (
            f"ClientSettings(address={self.address!r}, token={token!r}, "
            f"timeout={self.timeout!r}, tls_skip_verify={self.tls_skip_verify!r})"
        )

    @classmethod
    def resolve(
        cls,
        resolver: CredentialResolver,
        *,
        address: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        tls_skip_verify: bool | None = None,
    ) -> "ClientSettings":
        """Resolve settings from explicit values, the environment and defaults.

        Explicit arguments win over environment variables. The token may also
        come from a file named by ``WAYPOINT_SERVER_TOKEN_FILE``.

        Raises:
            SettingsError: If the timeout is not a positive number, or the
                token file named by the environment cannot be read.
        """
        resolved_address = resolver.resolve(
            value=address, env_var_name=ADDRESS_ENV, default=DEFAULT_ADDRESS, mask_in_logs=False
        )
        resolved_token = resolver.resolve(value=token, env_var_name=TOKEN_ENV)
        if not resolved_token:
            token_file = resolver.resolve(env_var_name=TOKEN_FILE_ENV, mask_in_logs=False)
            if token_file:
                try:
                    resolved_token = resolver.resolve_from_file(token_file)
                except CredentialError as e:
                    raise SettingsError(f"{TOKEN_FILE_ENV}: {e}") from e

        if timeout is None:
            raw_timeout = resolver.resolve(env_var_name=TIMEOUT_ENV, mask_in_logs=False)
            timeout = _parse_timeout(raw_timeout) if raw_timeout is not None else DEFAULT_TIMEOUT
        elif timeout <= 0:
            raise SettingsError(f"Timeout must be a positive number of seconds, got {timeout}")

        settings = cls(
            address=normalize_address(resolved_address or DEFAULT_ADDRESS),
            token=resolved_token or None,
            timeout=timeout,
            tls_skip_verify=resolver.resolve_flag(value=tls_skip_verify, env_var_name=TLS_SKIP_VERIFY_ENV),
        )
        logger.debug(f"Using {settings!r}")
        return settings


def normalize_address(address: str) -> str:
    """Return ``address`` as a base URL, defaulting the scheme to https."""
    address = address.strip().rstrip("/")
    if "://" not in address:
        address = f"https://{address}"
    return address


def _parse_timeout(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise SettingsError(f"{TIMEOUT_ENV} must be a number of seconds, got {raw!r}") from None
    if value <= 0:
        raise SettingsError(f"{TIMEOUT_ENV} must be a positive number of seconds, got {raw!r}")
    return value
