"""Console logging helpers."""

from vmprovision.logging.filters import StreamRoutingFilter
from vmprovision.logging.formatters import StreamFormatter

__all__ = ["StreamFormatter", "StreamRoutingFilter"]
