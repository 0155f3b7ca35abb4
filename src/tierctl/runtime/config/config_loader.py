"""Load config.yaml into validated settings."""

from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from loguru import logger
from pydantic import ValidationError

from tierctl.errors import ConfigError
from tierctl.runtime.config.config_data import ConfigData
from tierctl.runtime.config.config_utils import substitute_env_vars

CONFIG_PATH = Path("config.yaml")


def load_config(
    file_path: Path = CONFIG_PATH, *, env_file: Path | None = None
) -> ConfigData:
    """
    Load a YAML file with environment variable substitution.

    Args:
        file_path: Path to the YAML file (default: config.yaml)
        env_file: Optional .env file loaded before substitution. Variables
                  already present in the environment win.

    Returns:
        Validated ConfigData. A missing file yields all defaults.

    Raises:
        ConfigError: If required environment variables are missing, the YAML
                     is malformed, the top-level 'config' key is missing, or
                     validation fails.
    """
    if env_file is not None and env_file.exists():
        load_dotenv(env_file, override=False)
        logger.debug(f"Loaded environment from {env_file}")

    if not file_path.exists():
        logger.info(f"No configuration at {file_path}, using defaults")
        return ConfigData()

    logger.info(f"Loading configuration from {file_path}")
    content = substitute_env_vars(file_path.read_text())

    try:
        loaded: dict[str, Any] | None = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing {file_path}", str(e)) from e

    if not loaded:
        return ConfigData()
    if not isinstance(loaded, dict) or "config" not in loaded:
        raise ConfigError(f"Invalid YAML structure in {file_path}: missing 'config' key")

    try:
        return ConfigData(**(loaded["config"] or {}))
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {file_path}", str(e)) from e
