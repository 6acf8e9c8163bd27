import copy
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException

from vmprovision.constants import (
    CONFIG_ENV_VAR,
    DEFAULT_CONFIG_PATH,
    DEFAULT_TIMEOUT_SECONDS,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstanceConfig:
    """Settings used to launch an instance.

    Attributes
    ----------
    instance_type : str
        EC2 instance type, e.g. ``t2.micro``
    image_id : str
        AMI identifier, e.g. ``ami-0abcdef1234567890``
    region : str | None
        AWS region override; None defers to boto3's own resolution
    timeout : int
        Connect and read timeout for remote calls, in seconds
    """

    instance_type: str
    image_id: str
    region: str | None = None
    timeout: int = DEFAULT_TIMEOUT_SECONDS


class ConfigLoader:
    """Load and validate the instance configuration file."""

    def __init__(self) -> None:
        """Initialize ConfigLoader with built-in defaults."""
        self.BUILT_IN_DEFAULTS = {
            "region": None,
            "timeout": DEFAULT_TIMEOUT_SECONDS,
        }

    def resolve_path(self, config_path: str | None = None) -> Path:
        """Resolve the configuration file location.

        Parameters
        ----------
        config_path : str | None
            Explicit path. If None, checks VMPROVISION_CONFIG, then falls back
            to data/config.json

        Returns
        -------
        Path
            Configuration file path
        """
        if config_path is None:
            config_path = os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH)

        return Path(config_path)

    def load_config(self, config_path: str | None = None) -> InstanceConfig:
        """Load configuration from a JSON or YAML file.

        Parameters
        ----------
        config_path : str | None
            Path to config file. If None, checks VMPROVISION_CONFIG env var,
            then falls back to data/config.json

        Returns
        -------
        InstanceConfig
            Validated configuration merged over built-in defaults

        Raises
        ------
        ValueError
            If the file is missing, unreadable, malformed or fails validation
        """
        config_file = self.resolve_path(config_path)

        if not config_file.exists():
            raise ValueError(f"Configuration file not found: {config_file}")

        try:
            cfg = OmegaConf.load(config_file)
        except yaml.YAMLError as e:
            logger.debug("Failed to parse config file %s: %s", config_file, e)
            raise ValueError(f"Invalid configuration in {config_file}: {e}") from e
        except OSError as e:
            logger.debug("Failed to read config file %s: %s", config_file, e)
            raise ValueError(f"Failed to read config file {config_file}: {e}") from e

        if cfg is None or not OmegaConf.is_dict(cfg):
            raise ValueError(
                f"Invalid configuration in {config_file}: expected a mapping"
            )

        try:
            loaded = OmegaConf.to_container(cfg, resolve=True, throw_on_missing=True)
        except OmegaConfBaseException as e:
            raise ValueError(f"Configuration variable resolution error: {e}") from e

        merged = copy.deepcopy(self.BUILT_IN_DEFAULTS)
        for key, value in loaded.items():
            merged[key] = value

        self.validate_config(merged)
        logger.debug("Loaded configuration from %s", config_file)

        return InstanceConfig(
            instance_type=merged["instance_type"],
            image_id=merged["image_id"],
            region=merged["region"],
            timeout=merged["timeout"],
        )

    def validate_config(self, config: dict[str, Any]) -> None:
        """Validate configuration has required fields and correct types.

        Parameters
        ----------
        config : dict[str, Any]
            Configuration to validate

        Raises
        ------
        ValueError
            If configuration is invalid
        """
        for field in ("instance_type", "image_id"):
            if field not in config or config[field] in (None, ""):
                raise ValueError(f"{field} is required")

            if not isinstance(config[field], str):
                raise ValueError(f"{field} must be a string")

        region = config.get("region")
        if region is not None and (not isinstance(region, str) or not region):
            raise ValueError("region must be a non-empty string")

        timeout = config.get("timeout")
        if isinstance(timeout, bool) or not isinstance(timeout, int):
            raise ValueError("timeout must be an integer")

        if timeout <= 0:
            raise ValueError("timeout must be positive")
