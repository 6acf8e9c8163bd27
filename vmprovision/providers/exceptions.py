"""Provider-agnostic exceptions raised by compute gateways."""

from __future__ import annotations


class ProviderError(Exception):
    """Base class for all cloud provider errors."""


class ProviderCredentialsError(ProviderError):
    """Raised when cloud credentials are missing or incomplete."""


class ProviderAPIError(ProviderError):
    """Raised when the cloud provider rejects a request.

    Parameters
    ----------
    message : str
        Human readable error message
    error_code : str | None
        Provider error code (e.g. ``UnauthorizedOperation``)
    operation : str | None
        Name of the remote operation that failed
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        operation: str | None = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.operation = operation


class ProviderConnectionError(ProviderError):
    """Raised when the provider endpoint cannot be reached or times out."""
