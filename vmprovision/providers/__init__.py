"""Cloud provider implementations and their shared exceptions."""

from __future__ import annotations

from vmprovision.providers.aws import EC2Gateway
from vmprovision.providers.exceptions import (
    ProviderAPIError,
    ProviderConnectionError,
    ProviderCredentialsError,
    ProviderError,
)

__all__ = [
    "EC2Gateway",
    "ProviderError",
    "ProviderCredentialsError",
    "ProviderAPIError",
    "ProviderConnectionError",
]
