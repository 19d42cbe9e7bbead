"""Multi-source resolution of Waypoint server settings and credentials.

Resolution order (highest to lowest priority):
1. Explicitly provided value (a command-line option)
2. Environment variable
3. .env file (python-dotenv, loaded into the environment)
4. Default value

Example:
    ```python
    from waypoint_templates.auth import CredentialResolver

    resolver = CredentialResolver()

    address = resolver.resolve(env_var_name="WAYPOINT_SERVER_ADDR", default="localhost:9702", mask_in_logs=False)

    token = resolver.resolve(env_var_name="WAYPOINT_SERVER_TOKEN")
    if token is None:
        token = resolver.resolve_from_file("~/.config/waypoint/token")
    ```

Security Considerations:
    - Credentials are never logged in full (masked with ***)
    - Only source information is logged (env var name, file path, etc.)
    - File-based credentials have whitespace stripped
"""

import logging
import os
from pathlib import Path
from threading import Lock

from dotenv import load_dotenv

from waypoint_templates.auth.exceptions import CredentialFileError

logger = logging.getLogger(__name__)

TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


class CredentialResolver:
    """Resolve settings and credentials from multiple sources with priority ordering.

    Attributes:
        _dotenv_loaded: Whether .env file has been loaded.
        _dotenv_lock: Thread lock for safe dotenv loading.
    """

    def __init__(self, dotenv_path: str | None = None, load_dotenv: bool = True):
        """Initialize credential resolver.

        Args:
            dotenv_path: Path to .env file. If None, python-dotenv searches
                parent directories for one.
            load_dotenv: Whether to load the .env file at all. Tests pass
                False to keep the environment untouched.
        """
        self._dotenv_loaded = False
        self._dotenv_lock = Lock()
        self._dotenv_path = dotenv_path
        self._load_dotenv_enabled = load_dotenv

        if self._load_dotenv_enabled:
            self._ensure_dotenv_loaded()

    def _ensure_dotenv_loaded(self) -> None:
        """Load the .env file once (thread-safe)."""
        if self._dotenv_loaded:
            return

        with self._dotenv_lock:
            if self._dotenv_loaded:
                return

            try:
                load_dotenv(dotenv_path=self._dotenv_path)
                logger.debug("Loaded .env file for settings resolution")
            except OSError as e:
                logger.warning(f"Failed to load .env file: {e}")
            # Attempted either way; a broken .env must not block explicit values
            self._dotenv_loaded = True

    def _mask_credential(self, value: str | None) -> str:
        """Mask a credential value for safe logging."""
        if value is None:
            return "None"
        return "***"

    def resolve(
        self,
        *,
        value: str | None = None,
        env_var_name: str | None = None,
        default: str | None = None,
        mask_in_logs: bool = True,
    ) -> str | None:
        """Resolve a value from multiple sources.

        Args:
            value: Explicitly provided value (highest priority).
            env_var_name: Environment variable name to check.
            default: Default value if not found elsewhere.
            mask_in_logs: If True (default), masks values in log messages.
                Disable for non-sensitive settings such as the server address.

        Returns:
            Resolved value, or None if not found.
        """
        result = None
        source = None

        if value is not None:
            result = value
            source = "explicit parameter"
        elif env_var_name and env_var_name in os.environ:
            result = os.environ[env_var_name]
            source = f"environment variable '{env_var_name}'"
        elif default is not None:
            result = default
            source = "default value"

        if result is not None:
            shown = self._mask_credential(result) if mask_in_logs else result
            logger.debug(f"Resolved credential from {source}: {shown}")

        return result

    def resolve_flag(self, *, value: bool | None = None, env_var_name: str, default: bool = False) -> bool:
        """Resolve a boolean setting.

        Accepts 1/0, true/false, yes/no and on/off (case-insensitive) from the
        environment. Unrecognized values fall back to ``default`` with a warning.
        """
        if value is not None:
            return value

        raw = self.resolve(env_var_name=env_var_name, mask_in_logs=False)
        if raw is None:
            return default

        normalized = raw.strip().lower()
        if normalized in TRUE_VALUES:
            return True
        if normalized in FALSE_VALUES:
            return False

        logger.warning(f"Ignoring unrecognized boolean value {raw!r} for {env_var_name}")
        return default

    def resolve_from_file(self, file_path: str | Path) -> str:
        """Read a credential from a file.

        The path supports ``~`` and ``$VAR`` expansion. The file contents are
        returned stripped of surrounding whitespace.

        Args:
            file_path: Path to file containing the credential.

        Returns:
            File contents.

        Raises:
            CredentialFileError: If the file cannot be read.
        """
        path_obj = Path(os.path.expanduser(os.path.expandvars(str(file_path))))

        try:
            content = path_obj.read_text().strip()
        except FileNotFoundError:
            raise CredentialFileError(f"Credential file not found: {path_obj}") from None
        except PermissionError:
            raise CredentialFileError(f"Permission denied reading credential file: {path_obj}") from None
        except OSError as e:
            raise CredentialFileError(f"Error reading credential file {path_obj}: {e.strerror or e}") from e

        logger.debug(f"Resolved credential from file: {path_obj} (***)")
        return content
