"""Behave environment configuration for vmprovision acceptance tests."""

import logging
import os
import sys
import tempfile
from pathlib import Path

from behave.model import Scenario
from behave.runner import Context
from moto import mock_aws

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

logger = logging.getLogger(__name__)

TEST_REGION = "us-east-1"

MANAGED_ENV_VARS = (
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_DEFAULT_REGION",
    "VMPROVISION_CONFIG",
    "VMPROVISION_DEBUG",
)


def before_scenario(context: Context, scenario: Scenario) -> None:
    """Start moto and point the CLI at a scenario-local config file."""
    context.saved_env = {name: os.environ.get(name) for name in MANAGED_ENV_VARS}

    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = TEST_REGION
    os.environ.pop("VMPROVISION_DEBUG", None)

    context.mock_aws_env = mock_aws()
    context.mock_aws_env.start()

    context.tmp_dir = tempfile.TemporaryDirectory()
    context.config_path = Path(context.tmp_dir.name) / "config.json"
    os.environ["VMPROVISION_CONFIG"] = str(context.config_path)

    context.root_handlers = logging.getLogger().handlers[:]
    context.root_level = logging.getLogger().level

    logger.debug("Prepared scenario: %s", scenario.name)


def after_scenario(context: Context, scenario: Scenario) -> None:
    """Stop moto and restore the environment and root logger."""
    root = logging.getLogger()
    root.handlers[:] = context.root_handlers
    root.setLevel(context.root_level)

    context.mock_aws_env.stop()
    context.tmp_dir.cleanup()

    for name, value in context.saved_env.items():
        if value is not None:
            os.environ[name] = value
        else:
            os.environ.pop(name, None)
