"""
Configuration management for the CI results aggregator.
"""

import logging
import os
import threading
from dataclasses import dataclass, fields
from typing import Any, Dict, List, Optional

import yaml

from .sorting import SortBy

logger = logging.getLogger(__name__)

# Module-level lock for thread-safe config loading
_config_lock = threading.Lock()


class ConfigurationError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""

    pass


@dataclass
class AggregatorConfig:
    """Options recognized by the analyzer.

    Example config YAML::

        out_of_date_hours: 24
        sort_jobs_by: status
    """

    # Results older than this many hours are flagged out of date; 0 disables the check
    out_of_date_hours: int = 0
    sort_jobs_by: SortBy = SortBy.NAME

    def __post_init__(self) -> None:
        """Coerce a string sort key into SortBy."""
        if not isinstance(self.sort_jobs_by, SortBy):
            self.sort_jobs_by = SortBy.parse(self.sort_jobs_by)


def _parse_env_int(var_name: str) -> Optional[int]:
    """
    Safely parse an integer from an environment variable.

    Args:
        var_name: Name of the environment variable

    Returns:
        Parsed integer value, or None if the variable is not set

    Raises:
        ConfigurationError: If the value cannot be parsed as an integer
    """
    value = os.environ.get(var_name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(
            f"Environment variable {var_name} must be a valid integer, got: '{value}'"
        )


def _read_config_file(config_file: str) -> Dict[str, Any]:
    """Read a YAML config file into a mapping (empty file gives an empty mapping)."""
    logger.info("Loading configuration from %s", config_file)
    try:
        with open(config_file, "r") as f:
            file_config = yaml.safe_load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Configuration file not found: {config_file}")
    except OSError as e:
        raise ConfigurationError(f"Unable to read config file '{config_file}': {e}")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file '{config_file}': {e}")

    if file_config is None:
        return {}
    if not isinstance(file_config, dict):
        raise ConfigurationError(f"Config file '{config_file}' must contain a mapping at top level")
    return file_config


def load_config(config_file: Optional[str] = None) -> AggregatorConfig:
    """
    Load analyzer options, letting ``AGGREGATOR_*`` environment variables
    override values from the YAML file, which override the defaults.

    Raises:
        FileNotFoundError: If config_file is specified but doesn't exist
        ConfigurationError: If the file is unreadable or invalid, a key is
            unknown, or an environment variable is malformed
    """
    with _config_lock:
        options = _read_config_file(config_file) if config_file else {}

        env_overrides = _load_from_env()
        if env_overrides:
            logger.debug("Environment overrides: %s", sorted(env_overrides))
        options.update(env_overrides)

        unknown = sorted(set(options) - {f.name for f in fields(AggregatorConfig)})
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")
        return AggregatorConfig(**options)


def _load_from_env() -> Dict[str, Any]:
    """
    Load configuration from environment variables.

    Supported environment variables:
    - AGGREGATOR_OUT_OF_DATE_HOURS: Staleness threshold in hours
    - AGGREGATOR_SORT_JOBS_BY: Sort key name

    Returns:
        Dictionary of configuration values from environment

    Raises:
        ConfigurationError: If environment variable values are invalid
    """
    env_config: Dict[str, Any] = {}

    out_of_date = _parse_env_int("AGGREGATOR_OUT_OF_DATE_HOURS")
    if out_of_date is not None:
        env_config["out_of_date_hours"] = out_of_date

    if "AGGREGATOR_SORT_JOBS_BY" in os.environ:
        env_config["sort_jobs_by"] = os.environ["AGGREGATOR_SORT_JOBS_BY"]

    return env_config


def validate_config(config: AggregatorConfig) -> List[str]:
    """
    Validate configuration and return list of errors.

    Args:
        config: AggregatorConfig to validate

    Returns:
        List of error messages (empty if valid)
    """
    errors: List[str] = []

    if not isinstance(config.out_of_date_hours, int) or isinstance(config.out_of_date_hours, bool):
        errors.append(f"out_of_date_hours must be an integer: {config.out_of_date_hours!r}")
    elif config.out_of_date_hours < 0:
        errors.append(f"out_of_date_hours must not be negative: {config.out_of_date_hours}")

    return errors
