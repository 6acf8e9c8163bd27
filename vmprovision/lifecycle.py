from __future__ import annotations

import logging
import sys
from typing import Any

from vmprovision.constants import DEFAULT_TIMEOUT_SECONDS, ExitCode
from vmprovision.core.interfaces import ComputeGateway
from vmprovision.providers.aws.utils import build_tag_filter
from vmprovision.providers.exceptions import (
    ProviderAPIError,
    ProviderConnectionError,
)
from vmprovision.utils import format_instance_ids


class LifecycleManager:
    """Runs the create and delete commands against a compute gateway.

    Parameters
    ----------
    config_loader : Any
        Configuration loader instance
    gateway_factory : Any
        Factory called with ``region`` and ``timeout`` keyword arguments,
        returning a :class:`ComputeGateway`
    log_and_print_error : Any
        Function to log and print errors to stderr
    """

    def __init__(
        self,
        config_loader: Any,
        gateway_factory: Any,
        log_and_print_error: Any,
    ) -> None:
        self.config_loader = config_loader
        self.gateway_factory = gateway_factory
        self.log_and_print_error = log_and_print_error

    def create(
        self,
        name: str,
        value: str,
        config_path: str | None = None,
        region: str | None = None,
    ) -> str:
        """Launch one instance from the configuration file and tag it.

        Parameters
        ----------
        name : str
            Tag key
        value : str
            Tag value, applied verbatim
        config_path : str | None
            Configuration file override
        region : str | None
            Region override; falls back to the configured region

        Returns
        -------
        str
            ID of the created instance

        Raises
        ------
        ValueError
            If the configuration file is missing or invalid. Raised before any
            remote call is made
        SystemExit
            Exits with code 1 if launching or tagging fails. An instance that
            launched but could not be tagged is left running
        """
        config = self.config_loader.load_config(config_path)
        gateway: ComputeGateway = self.gateway_factory(
            region=region or config.region, timeout=config.timeout
        )

        logging.info(
            "Launching %s instance from %s...", config.instance_type, config.image_id
        )

        try:
            instance_id = gateway.run_instance(config.image_id, config.instance_type)
        except (ProviderAPIError, ProviderConnectionError) as e:
            self.log_and_print_error("Got an error creating an instance: %s", e)
            sys.exit(ExitCode.FAILURE)

        try:
            gateway.create_tags([instance_id], name, value)
        except (ProviderAPIError, ProviderConnectionError) as e:
            self.log_and_print_error(
                "Got an error tagging instance %s: %s", instance_id, e
            )
            sys.exit(ExitCode.FAILURE)

        print(f"Created tagged instance with ID {instance_id}")
        return instance_id

    def delete(
        self,
        name: str,
        value: str,
        region: str | None = None,
        timeout: int = DEFAULT_TIMEOUT_SECONDS,
    ) -> list[str]:
        """Terminate every instance whose tag matches one of the given values.

        Parameters
        ----------
        name : str
            Tag key to match
        value : str
            Comma-separated list of acceptable tag values
        region : str | None
            Region to search; None defers to boto3's region resolution
        timeout : int
            Remote call timeout in seconds

        Returns
        -------
        list[str]
            IDs of the terminated instances, empty when nothing matched

        Raises
        ------
        SystemExit
            Exits with code 1 if listing or terminating fails
        """
        filters = build_tag_filter(name, value)
        gateway: ComputeGateway = self.gateway_factory(region=region, timeout=timeout)

        try:
            instance_ids = gateway.find_instances(filters)
        except (ProviderAPIError, ProviderConnectionError) as e:
            self.log_and_print_error(
                "Got an error fetching the status of the instance: %s", e
            )
            sys.exit(ExitCode.FAILURE)

        print(f"Instance IDs: {format_instance_ids(instance_ids)}")

        if not instance_ids:
            print(
                f"No instances matched {filters[0]['Name']}="
                f"{','.join(filters[0]['Values'])}"
            )
            return []

        try:
            terminated = gateway.terminate_instances(instance_ids)
        except (ProviderAPIError, ProviderConnectionError) as e:
            self.log_and_print_error("Got an error terminating the instance: %s", e)
            sys.exit(ExitCode.FAILURE)

        for instance_id in terminated:
            print(f"Terminated instance with id: {instance_id}")

        return terminated
