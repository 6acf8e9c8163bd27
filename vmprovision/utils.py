"""Utility functions for vmprovision."""

import logging
import sys
from typing import Any


def log_and_print_error(message: str, *args: Any) -> None:
    """Log error message and print to stderr.

    The log record is marked so the console handlers skip it and the
    message reaches the terminal exactly once.

    Parameters
    ----------
    message : str
        Error message with optional format placeholders
    *args : Any
        Format arguments for message
    """
    logging.error(message, *args, extra={"console": False})
    formatted_msg = message % args if args else message
    print(f"Error: {formatted_msg}", file=sys.stderr)


def format_instance_ids(instance_ids: list[str]) -> str:
    """Render instance IDs as a bracketed, space separated list.

    Parameters
    ----------
    instance_ids : list[str]
        Instance IDs to render

    Returns
    -------
    str
        String such as ``[i-0abc i-0def]``
    """
    return "[" + " ".join(instance_ids) + "]"
