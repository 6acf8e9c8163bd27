"""Provision and decommission tagged EC2 instances."""

__version__ = "0.1.0"
