"""Pytest fixtures for vmprovision unit tests."""

import pytest

from vmprovision.__main__ import VMProvision


@pytest.fixture
def vmprovision(gateway_factory) -> VMProvision:
    """Return VMProvision wired to the fake gateway factory."""
    return VMProvision(gateway_factory=gateway_factory)
