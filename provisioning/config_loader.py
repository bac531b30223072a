# provisioning/config_loader.py
# -*- coding: utf-8 -*-
"""
Configuration loader for the provisioner.

Applies the following order of precedence, lowest first:
1. Pydantic Model Defaults
2. Environment Variables (DOCKER_PROVISION_*, loaded by BaseSettings)
3. YAML Configuration File
4. Command-Line Overrides
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from common.errors import ConfigurationError

from .config_models import AppSettings

module_logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "config.yaml"


def _deep_update(
    source: Dict[str, Any], overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Recursively updates `source` with values from `overrides`.

    Nested dictionaries are merged key by key; any other value replaces the
    one in `source`. None values in `overrides` never replace an existing
    value.
    """
    for key, value in overrides.items():
        if (
            isinstance(value, dict)
            and key in source
            and isinstance(source[key], dict)
        ):
            source[key] = _deep_update(source[key], value)
        elif value is not None:
            source[key] = value
        elif key not in source:
            source[key] = value
    return source


def load_yaml_config(
    config_file_path: Union[str, Path],
    current_logger: Optional[logging.Logger] = None,
) -> Dict[str, Any]:
    """
    Read a YAML mapping from config_file_path.

    A missing file or a document that is not a mapping yields {} (the
    latter with a warning).

    Raises:
        ConfigurationError: The file exists but cannot be read or parsed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    yaml_config_path = Path(config_file_path)

    if not yaml_config_path.is_file():
        logger_to_use.info(
            f"Configuration file '{yaml_config_path}' not found. Using defaults, environment variables, and CLI args."
        )
        return {}

    try:
        with open(yaml_config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Could not parse YAML config file '{yaml_config_path}': {e}"
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Could not read config file '{yaml_config_path}': {e}"
        ) from e

    if yaml_data is None:
        return {}
    if not isinstance(yaml_data, dict):
        logger_to_use.warning(
            f"Config file '{yaml_config_path}' does not contain a valid YAML dictionary. Ignoring."
        )
        return {}

    logger_to_use.info(f"Loaded configuration from {yaml_config_path}")
    return yaml_data


def load_app_settings(
    config_file_path: Union[str, Path] = DEFAULT_CONFIG_FILE,
    cli_overrides: Optional[Dict[str, Any]] = None,
    current_logger: Optional[logging.Logger] = None,
) -> AppSettings:
    """
    Loads provisioner settings.

    Args:
        config_file_path: Path to the YAML configuration file. Optional.
        cli_overrides: Values from the command line, highest precedence.
            Nested sections are given as nested dicts.
        current_logger: Optional logger to use instead of the module logger.

    Returns:
        The fully resolved AppSettings.

    Raises:
        ConfigurationError: The YAML file is unreadable or the merged values
            fail validation.
    """
    logger_to_use = current_logger if current_logger else module_logger

    try:
        # Defaults < environment variables.
        current_values_dict = AppSettings().model_dump()
        current_values_dict = _deep_update(
            current_values_dict,
            load_yaml_config(config_file_path, logger_to_use),
        )
        if cli_overrides:
            current_values_dict = _deep_update(
                current_values_dict, cli_overrides
            )
        return AppSettings(**current_values_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def dump_app_settings(app_settings: AppSettings) -> str:
    """Render settings as YAML, e.g. for --view-config."""
    return yaml.safe_dump(
        app_settings.model_dump(mode="json"),
        sort_keys=False,
        allow_unicode=True,
    )
