#!/usr/bin/env python3
"""vmprovision - provision or terminate tagged EC2 instances."""

from __future__ import annotations

import logging
import sys
from typing import Any, Callable

import boto3

for _boto_module in ["botocore", "boto3", "urllib3"]:
    logging.getLogger(_boto_module).setLevel(logging.WARNING)

from vmprovision.cli.main import main  # noqa: E402
from vmprovision.cli.parsing import parse_command, parse_flag_value  # noqa: E402
from vmprovision.constants import (  # noqa: E402
    DEFAULT_TIMEOUT_SECONDS,
    START_BANNER,
    Command,
    ExitCode,
)
from vmprovision.core.config import ConfigLoader  # noqa: E402
from vmprovision.core.interfaces import ComputeGateway  # noqa: E402
from vmprovision.lifecycle import LifecycleManager  # noqa: E402
from vmprovision.providers.aws.compute import EC2Gateway  # noqa: E402
from vmprovision.utils import log_and_print_error  # noqa: E402

USAGE_MISSING_COMMAND = "You must supply a command create or delete (-c create)"
USAGE_MISSING_TAG = "You must supply a name and value for the tag (-n NAME -v VALUE)"


class VMProvision:
    """Main CLI interface for vmprovision.

    Parameters
    ----------
    gateway_factory : Callable[..., ComputeGateway] | None
        Optional factory called with ``region``, ``timeout`` and ``dry_run``
        keyword arguments. If None, builds an :class:`EC2Gateway`
    boto3_client_factory : Callable | None
        Optional factory for boto3 clients used by the default gateway
    """

    def __init__(
        self,
        gateway_factory: Callable[..., ComputeGateway] | None = None,
        boto3_client_factory: Callable | None = None,
    ) -> None:
        self._config_loader = ConfigLoader()
        self._boto3_client_factory = boto3_client_factory or boto3.client
        self._gateway_factory_override = gateway_factory
        self._dry_run = False
        self._lifecycle_manager: LifecycleManager | None = None

    def _create_gateway(
        self, region: str | None = None, timeout: int = DEFAULT_TIMEOUT_SECONDS
    ) -> ComputeGateway:
        """Create a gateway honouring the current dry-run setting."""
        if self._gateway_factory_override is not None:
            return self._gateway_factory_override(
                region=region, timeout=timeout, dry_run=self._dry_run
            )

        return EC2Gateway(
            region=region,
            timeout=timeout,
            dry_run=self._dry_run,
            boto3_client_factory=self._boto3_client_factory,
        )

    @property
    def lifecycle_manager(self) -> LifecycleManager:
        """Get the lifecycle manager instance."""
        if self._lifecycle_manager is None:
            self._lifecycle_manager = LifecycleManager(
                config_loader=self._config_loader,
                gateway_factory=self._create_gateway,
                log_and_print_error=log_and_print_error,
            )
        return self._lifecycle_manager

    def run(
        self,
        command: Any = "",
        name: Any = "",
        value: Any = "",
        file: str | None = None,
        region: str | None = None,
        dry_run: bool = False,
        log_level: str = "INFO",
    ) -> None:
        """Create or delete a tagged EC2 instance.

        Parameters
        ----------
        command : str
            ``create`` or ``delete`` (-c)
        name : str
            Tag key (-n)
        value : str
            Tag value (-v). For delete, a comma-separated list of values
        file : str | None
            Instance configuration file, defaults to data/config.json
        region : str | None
            AWS region override
        dry_run : bool
            Validate requests with EC2 without executing them
        log_level : str
            Logging level for the run, e.g. DEBUG
        """
        logging.getLogger().setLevel(str(log_level).upper())
        print(START_BANNER)

        command_str = parse_flag_value(command)
        if not command_str.strip():
            log_and_print_error(USAGE_MISSING_COMMAND)
            sys.exit(ExitCode.USAGE)

        tag_name = parse_flag_value(name)
        tag_value = parse_flag_value(value)
        if not tag_name.strip() or not tag_value.strip():
            log_and_print_error(USAGE_MISSING_TAG)
            sys.exit(ExitCode.USAGE)

        try:
            selected = parse_command(command_str)
        except ValueError as e:
            log_and_print_error(str(e))
            sys.exit(ExitCode.USAGE)

        self._dry_run = bool(dry_run)
        if self._dry_run:
            logging.info("Dry run enabled: EC2 will validate requests only")

        if selected is Command.CREATE:
            self.create(tag_name, tag_value, file=file, region=region)
        elif selected is Command.DELETE:
            self.delete(tag_name, tag_value, region=region)

    def create(
        self, name: str, value: str, file: str | None = None, region: str | None = None
    ) -> str:
        """Launch an instance from the configuration file and tag it."""
        return self.lifecycle_manager.create(
            name=name, value=value, config_path=file, region=region
        )

    def delete(self, name: str, value: str, region: str | None = None) -> list[str]:
        """Terminate instances tagged with name and any of the listed values."""
        return self.lifecycle_manager.delete(name=name, value=value, region=region)


if __name__ == "__main__":
    main()
