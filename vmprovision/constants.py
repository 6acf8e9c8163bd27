"""Global constants for vmprovision.

This module contains application-wide constants shared by the CLI, the
lifecycle handlers and the compute gateways.
"""

from enum import Enum

DEFAULT_CONFIG_PATH = "data/config.json"
"""Configuration file consulted when neither --file nor VMPROVISION_CONFIG is set.

Resolved relative to the current working directory, matching how the tool is
run from a checkout or a container image that ships a data/ directory.
"""

CONFIG_ENV_VAR = "VMPROVISION_CONFIG"
"""Environment variable overriding the configuration file path."""

DEBUG_ENV_VAR = "VMPROVISION_DEBUG"
"""Environment variable that, when set to "1", re-raises errors with tracebacks."""

DEFAULT_TIMEOUT_SECONDS = 60
"""Connect and read timeout applied to every remote call, in seconds.

Bounds how long a hung EC2 endpoint can block the process.
"""

INSTANCE_COUNT = 1
"""Number of instances requested by a create command (MinCount and MaxCount)."""

TAG_FILTER_PREFIX = "tag:"
"""Prefix EC2 expects on describe filters that match a tag key."""

TAG_VALUE_SEPARATOR = ","
"""Separator for multiple acceptable tag values on the delete command."""

START_BANNER = "Provisioning/De-provisioning EC2 in progress"


class Command(str, Enum):
    """Commands accepted by the -c flag."""

    CREATE = "create"
    DELETE = "delete"


class ExitCode(int, Enum):
    """Process exit statuses."""

    SUCCESS = 0
    FAILURE = 1
    USAGE = 2
