"""Exceptions raised while resolving server settings and credentials."""


class CredentialError(Exception):
    """Base exception for credential-related errors."""

    pass


class CredentialFileError(CredentialError):
    """Raised when a credential file cannot be read (missing, permission denied, etc.)."""

    pass
