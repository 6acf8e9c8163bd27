"""Logging filters for stdout/stderr routing."""

import logging


class StreamRoutingFilter(logging.Filter):
    """Route log records to either the stdout or the stderr handler.

    Records carrying an explicit ``stream`` attribute go to that stream.
    Otherwise INFO and below go to stdout and WARNING and above to stderr.
    Records logged with ``console=False`` are dropped.

    Parameters
    ----------
    target : str
        Stream this filter guards, ``"stdout"`` or ``"stderr"``
    """

    def __init__(self, target: str) -> None:
        super().__init__()

        if target not in ("stdout", "stderr"):
            raise ValueError(f"Unknown stream target: {target}")

        self.target = target

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "console", True) is False:
            return False

        stream = getattr(record, "stream", None)

        if stream is None:
            stream = "stderr" if record.levelno >= logging.WARNING else "stdout"

        return stream == self.target
