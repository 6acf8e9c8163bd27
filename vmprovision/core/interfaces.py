"""Protocols describing the boundary between handlers and cloud providers."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ComputeGateway(Protocol):
    """Remote operations the lifecycle handlers rely on.

    Implementations raise subclasses of
    :class:`vmprovision.providers.exceptions.ProviderError` on failure.
    """

    def run_instance(self, image_id: str, instance_type: str) -> str:
        """Launch exactly one instance and return its ID."""
        ...

    def create_tags(self, resource_ids: list[str], key: str, value: str) -> None:
        """Attach a single key/value tag to the given resources."""
        ...

    def find_instances(self, filters: list[dict[str, Any]]) -> list[str]:
        """Return IDs of all instances matching the describe filters."""
        ...

    def terminate_instances(self, instance_ids: list[str]) -> list[str]:
        """Terminate the given instances and return the IDs being terminated."""
        ...
