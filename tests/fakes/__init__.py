"""Test fake implementations for dependency injection testing."""

from tests.fakes.fake_gateway import FakeGateway

__all__ = ["FakeGateway"]
