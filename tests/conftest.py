"""Pytest configuration and fixtures for vmprovision tests."""

import json
import os
import sys
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

tests_root = Path(__file__).parent.parent
if str(tests_root) not in sys.path:
    sys.path.insert(0, str(tests_root))

from tests.fakes import FakeGateway  # noqa: E402


@pytest.fixture
def aws_credentials() -> Generator[None, None, None]:
    """Fixture to set AWS credentials for testing with proper cleanup.

    Sets mock AWS credentials in environment variables for the duration of the test,
    then restores the original environment state.

    Yields
    ------
    None
        Control back to test after setting credentials
    """
    names = ("AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_DEFAULT_REGION")
    saved = {name: os.environ.get(name) for name in names}

    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"

    yield

    for name, old_value in saved.items():
        if old_value is not None:
            os.environ[name] = old_value
        else:
            os.environ.pop(name, None)


@pytest.fixture
def config_file(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary config file path and point VMPROVISION_CONFIG at it.

    Parameters
    ----------
    tmp_path : Path
        Pytest temporary directory path

    Yields
    ------
    Path
        Path to temporary config file
    """
    config_path = tmp_path / "config.json"

    original_env = os.environ.get("VMPROVISION_CONFIG")
    os.environ["VMPROVISION_CONFIG"] = str(config_path)

    yield config_path

    if original_env is not None:
        os.environ["VMPROVISION_CONFIG"] = original_env
    else:
        os.environ.pop("VMPROVISION_CONFIG", None)


@pytest.fixture
def write_config(config_file: Path):
    """Helper fixture to write config data to file as JSON.

    Parameters
    ----------
    config_file : Path
        Path to config file from config_file fixture

    Returns
    -------
    callable
        Function that takes config_data dict and writes to file
    """

    def _write(config_data: dict[str, Any]) -> None:
        with open(config_file, "w") as f:
            json.dump(config_data, f)

    return _write


@pytest.fixture
def valid_config(write_config) -> dict[str, Any]:
    """Write a minimal valid configuration and return its contents."""
    config_data = {"instance_type": "t2.micro", "image_id": "ami-0abcdef1234567890"}
    write_config(config_data)
    return config_data


@pytest.fixture
def fake_gateway() -> FakeGateway:
    """Return a fresh FakeGateway."""
    return FakeGateway()


@pytest.fixture
def gateway_factory(fake_gateway: FakeGateway):
    """Factory that hands out fake_gateway and records how it was built.

    Returns
    -------
    callable
        Gateway factory with a ``builds`` list of keyword arguments
    """

    def _factory(**kwargs: Any) -> FakeGateway:
        _factory.builds.append(kwargs)
        fake_gateway.region = kwargs.get("region")
        fake_gateway.timeout = kwargs.get("timeout", fake_gateway.timeout)
        fake_gateway.dry_run = kwargs.get("dry_run", False)
        return fake_gateway

    _factory.builds = []
    return _factory
