"""AWS provider implementation."""

from vmprovision.providers.aws.compute import EC2Gateway

__all__ = ["EC2Gateway"]
