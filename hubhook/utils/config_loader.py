"""Webhook configuration loader."""

from pathlib import Path  # noqa: TC003
from typing import Any

import yaml

from hubhook.models.config import WebhookConfig
from hubhook.utils.logging import get_logger

logger = get_logger("utils.config_loader")


class ConfigLoaderError(Exception):
    """Error raised when configuration loading fails."""

    pass


# Config file names in order of precedence
CONFIG_FILE_NAMES = [
    ".hubhook.yml",
    ".hubhook.yaml",
]


def load_config(config_dir: Path) -> WebhookConfig:
    """Load webhook configuration.

    Looks for configuration in the following order:
    1. .hubhook.yml
    2. .hubhook.yaml

    If no config file is found, or it is empty, the secret is read from the
    GITHUB_WEBHOOK_SECRET environment variable.

    Args:
        config_dir: Directory holding the config file.

    Returns:
        WebhookConfig instance.

    Raises:
        ConfigLoaderError: If the config file is invalid or no secret is available.
    """
    config_file = _find_config_file(config_dir)

    if config_file is None:
        logger.debug("No config file found, using environment", extra={"path": str(config_dir)})
        return _from_env()

    try:
        raw_config = _load_yaml_file(config_file)
    except yaml.YAMLError as e:
        raise ConfigLoaderError(f"Failed to parse config file {config_file}: {e}") from e

    if not raw_config:
        logger.debug("Config file is empty, using environment", extra={"file": str(config_file)})
        return _from_env()

    if not isinstance(raw_config, dict):
        raise ConfigLoaderError(f"Config file {config_file} must contain a mapping")

    try:
        config = WebhookConfig.from_dict(raw_config)
    except ValueError as e:
        raise ConfigLoaderError(f"Invalid configuration in {config_file}: {e}") from e

    logger.info(
        "Loaded configuration",
        extra={
            "file": str(config_file),
            "signature_header": config.signature_header,
            "strict": config.strict,
        },
    )
    return config


def _from_env() -> WebhookConfig:
    try:
        return WebhookConfig.from_env()
    except ValueError as e:
        raise ConfigLoaderError(str(e)) from e


def _find_config_file(config_dir: Path) -> Path | None:
    """Find the configuration file in a directory.

    Args:
        config_dir: Directory to search.

    Returns:
        Path to config file, or None if not found.
    """
    for filename in CONFIG_FILE_NAMES:
        config_path = config_dir / filename
        if config_path.exists() and config_path.is_file():
            return config_path

    return None


def _load_yaml_file(filepath: Path) -> Any:
    """Load a YAML file.

    Args:
        filepath: Path to the YAML file.

    Returns:
        Parsed YAML content, or None if empty.

    Raises:
        yaml.YAMLError: If YAML is invalid.
        OSError: If file cannot be read.
    """
    content = filepath.read_text(encoding="utf-8")

    if not content.strip():
        return None

    return yaml.safe_load(content)
