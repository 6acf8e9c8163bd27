"""CLI entry point for vmprovision."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Callable, Sequence
from typing import Any

import fire

from vmprovision.constants import DEBUG_ENV_VAR, ExitCode
from vmprovision.cli.parsing import quote_string_flags
from vmprovision.logging import StreamFormatter, StreamRoutingFilter
from vmprovision.providers import (
    ProviderAPIError,
    ProviderConnectionError,
    ProviderCredentialsError,
)
from vmprovision.providers.aws.constants import (
    EXPIRED_CREDENTIAL_ERROR_CODES,
    NOT_FOUND_ERROR_PREFIXES,
    QUOTA_ERROR_CODES,
)
from vmprovision.providers.aws.utils import get_aws_credentials_error_message


def get_vmprovision_class() -> type:
    """Get VMProvision class on-demand to avoid circular imports.

    Returns
    -------
    type
        VMProvision class
    """
    from vmprovision.__main__ import VMProvision

    return VMProvision


def handle_credentials_error(debug_mode: bool) -> None:
    """Handle provider credentials error.

    Parameters
    ----------
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    ProviderCredentialsError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    print(get_aws_credentials_error_message(), file=sys.stderr)
    sys.exit(ExitCode.FAILURE)


def handle_value_error(error: ValueError, debug_mode: bool) -> None:
    """Handle configuration error.

    Parameters
    ----------
    error : ValueError
        The value error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    ValueError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    print(f"Configuration error: {error}", file=sys.stderr)
    sys.exit(ExitCode.USAGE)


def handle_api_error(error: ProviderAPIError, debug_mode: bool) -> None:
    """Handle provider API error with context-specific messages.

    Parameters
    ----------
    error : ProviderAPIError
        The API error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    ProviderAPIError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    error_code = error.error_code or ""
    error_msg = str(error)

    if error_code == "UnauthorizedOperation":
        print("Insufficient IAM permissions\n", file=sys.stderr)
        print("Contact your cloud administrator to grant:", file=sys.stderr)
        print(
            "  - ec2:RunInstances, ec2:CreateTags, ec2:DescribeInstances, "
            "ec2:TerminateInstances",
            file=sys.stderr,
        )
    elif error_code.startswith(NOT_FOUND_ERROR_PREFIXES):
        print(f"Resource not found: {error_msg}\n", file=sys.stderr)
        print("Check image_id in your configuration file", file=sys.stderr)
    elif error_code == "InvalidParameterValue" and "instance type" in error_msg.lower():
        print("Invalid instance type\n", file=sys.stderr)
        print("This usually means:", file=sys.stderr)
        print("  - Instance type not available in this region", file=sys.stderr)
        print("  - Typo in instance_type in your configuration file", file=sys.stderr)
    elif error_code in QUOTA_ERROR_CODES:
        print("Cloud quota exceeded\n", file=sys.stderr)
        print("Fix it:", file=sys.stderr)
        print("  https://console.aws.amazon.com/servicequotas/", file=sys.stderr)
    elif error_code in EXPIRED_CREDENTIAL_ERROR_CODES:
        print("Cloud credentials have expired\n", file=sys.stderr)
        print("Fix it:", file=sys.stderr)
        print("  aws sso login           # If using AWS SSO", file=sys.stderr)
        print("  aws configure           # Re-configure credentials", file=sys.stderr)
    else:
        print(f"Cloud API error: {error_msg}", file=sys.stderr)

    sys.exit(ExitCode.FAILURE)


def handle_connection_error(error: ProviderConnectionError, debug_mode: bool) -> None:
    """Handle unreachable or timed out provider endpoint.

    Parameters
    ----------
    error : ProviderConnectionError
        The connection error that was raised
    debug_mode : bool
        Whether debug mode is enabled

    Raises
    ------
    ProviderConnectionError
        Re-raised if debug mode is enabled
    """
    if debug_mode:
        raise

    print(f"Could not reach the cloud provider: {error}", file=sys.stderr)
    sys.exit(ExitCode.FAILURE)


def configure_logging(level: int = logging.INFO) -> None:
    """Route log records to stdout and stderr by level.

    Parameters
    ----------
    level : int
        Root logger level
    """
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(StreamFormatter("%(message)s"))
    stdout_handler.addFilter(StreamRoutingFilter("stdout"))

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(StreamFormatter("%(message)s"))
    stderr_handler.addFilter(StreamRoutingFilter("stderr"))

    logging.basicConfig(
        level=level,
        handlers=[stdout_handler, stderr_handler],
        force=True,
    )


def main(
    argv: Sequence[str] | None = None,
    gateway_factory: Callable[..., Any] | None = None,
) -> None:
    """Entry point for Fire CLI with graceful error handling.

    Fire maps the flags of ``VMProvision.run`` onto the command line, so
    ``-c``, ``-n`` and ``-v`` resolve to ``--command``, ``--name`` and
    ``--value``. Their values are quoted first so tag names and values reach
    the handlers exactly as typed.

    Parameters
    ----------
    argv : Sequence[str] | None
        Arguments to parse instead of ``sys.argv[1:]``
    gateway_factory : Callable[..., Any] | None
        Optional gateway factory forwarded to VMProvision
    """
    configure_logging()

    debug_mode = os.environ.get(DEBUG_ENV_VAR) == "1"
    vmprovision = get_vmprovision_class()(gateway_factory=gateway_factory)
    args = quote_string_flags(sys.argv[1:] if argv is None else argv)

    try:
        fire.Fire(vmprovision.run, command=args, name="vmprovision")
    except ProviderCredentialsError:
        handle_credentials_error(debug_mode)
    except ValueError as e:
        handle_value_error(e, debug_mode)
    except ProviderAPIError as e:
        handle_api_error(e, debug_mode)
    except ProviderConnectionError as e:
        handle_connection_error(e, debug_mode)
