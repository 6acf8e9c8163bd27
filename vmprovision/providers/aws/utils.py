"""AWS-specific utility functions for vmprovision."""

from __future__ import annotations

from typing import Any

from vmprovision.constants import TAG_FILTER_PREFIX, TAG_VALUE_SEPARATOR


def split_tag_values(value: str) -> list[str]:
    """Split a comma-separated tag value into filter values.

    Parameters
    ----------
    value : str
        Tag value such as ``"a,b,c"``

    Returns
    -------
    list[str]
        Individual values with surrounding whitespace removed and empty
        entries dropped
    """
    return [part.strip() for part in value.split(TAG_VALUE_SEPARATOR) if part.strip()]


def build_tag_filter(name: str, value: str) -> list[dict[str, Any]]:
    """Build a describe_instances filter matching a tag key and values.

    Parameters
    ----------
    name : str
        Tag key
    value : str
        Comma-separated list of acceptable tag values

    Returns
    -------
    list[dict[str, Any]]
        Filter list suitable for the ``Filters`` request parameter
    """
    return [{"Name": f"{TAG_FILTER_PREFIX}{name}", "Values": split_tag_values(value)}]


def get_aws_credentials_error_message() -> str:
    """Get standard AWS credentials error message.

    Returns
    -------
    str
        Formatted AWS credentials error message
    """
    return (
        "Cloud credentials not found\n\n"
        "Configure your credentials:\n"
        "  aws configure\n\n"
        "Or set environment variables:\n"
        "  export AWS_ACCESS_KEY_ID=...\n"
        "  export AWS_SECRET_ACCESS_KEY=..."
    )
