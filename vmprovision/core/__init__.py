"""Core vmprovision functionality."""

from __future__ import annotations

from vmprovision.core.config import ConfigLoader, InstanceConfig
from vmprovision.core.interfaces import ComputeGateway

__all__ = [
    "ComputeGateway",
    "ConfigLoader",
    "InstanceConfig",
]
