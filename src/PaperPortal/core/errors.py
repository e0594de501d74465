"""Error taxonomy for PaperPortal operations."""

from __future__ import annotations


class PortalError(Exception):
    """Base class for all PaperPortal errors."""


class AuthenticationRequired(PortalError):
    """A mutating operation was called without a caller identity."""


class AuthorizationError(PortalError):
    """The caller is neither the owner nor an admin."""


class FetchError(PortalError):
    """Read-path failure against the relational store."""


class PersistError(PortalError):
    """Write-path failure against the relational store."""


class UploadError(PortalError):
    """Binary storage failure, including disallowed type or size."""


class ConfigError(PortalError):
    """Hard configuration failure, e.g. a missing API key."""


class ImportProviderError(PortalError):
    """Citation provider failure; ``message`` is the provider's text verbatim."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
