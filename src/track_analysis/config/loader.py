"""
Configuration loading - file discovery, YAML parsing and env overrides.
"""

import logging
import os
from pathlib import Path

import yaml

from ..utils.constants import ENV_ANALYZER_URL, ENV_MODEL_FILE
from .schemas import Config
from .validator import validate_config

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "config.yaml"


class ConfigValidationError(Exception):
    """Raised when config loading or validation fails."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or []


def find_config_file(config_path: str | None = None) -> Path | None:
    """
    Find config file in standard locations.

    Search order:
    1. Specified path (must exist)
    2. Current directory (config.yaml)
    3. ~/.config/track-analysis/config.yaml

    Returns:
        Path to config file, or None to run on defaults

    Raises:
        ConfigValidationError: If an explicitly specified file does not exist
    """
    if config_path:
        specified = Path(config_path)
        if not specified.exists():
            raise ConfigValidationError(f"Specified config file not found: {config_path}")
        return specified

    search_paths = [
        Path.cwd() / DEFAULT_CONFIG_NAME,
        Path.home() / ".config" / "track-analysis" / DEFAULT_CONFIG_NAME,
    ]
    for path in search_paths:
        if path.exists():
            return path
    return None


def load_config_with_env(config: dict) -> dict:
    """
    Apply environment variable overrides to config.

    Args:
        config: Base configuration dictionary

    Returns:
        Configuration with environment variables applied
    """
    if ENV_MODEL_FILE in os.environ:
        logger.info(f"Using model file from environment: {ENV_MODEL_FILE}")
        config.setdefault("detection", {})["model_file"] = os.environ[ENV_MODEL_FILE]

    if ENV_ANALYZER_URL in os.environ:
        logger.info(f"Using classifier URL from environment: {ENV_ANALYZER_URL}")
        refinement = config.setdefault("refinement", {})
        refinement["analyzer_url"] = os.environ[ENV_ANALYZER_URL]
        refinement["backend"] = "http"

    return config


def read_config_file(config_path: str | None = None) -> dict:
    """
    Read the raw config dictionary (no validation, env applied).

    Raises:
        ConfigValidationError: If the file is missing or not valid YAML
    """
    config_file = find_config_file(config_path)
    if config_file is None:
        logger.info("No config file found - using defaults")
        return load_config_with_env({})

    try:
        with open(config_file, encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML in {config_file}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigValidationError(f"Config root must be a mapping: {config_file}")

    logger.info(f"Configuration loaded from {config_file}")
    return load_config_with_env(config)


def load_config(config_path: str | None = None) -> Config:
    """
    Load and validate configuration.

    Raises:
        ConfigValidationError: If the config cannot be loaded or is invalid
    """
    result = validate_config(read_config_file(config_path))
    if not result.valid:
        raise ConfigValidationError("Configuration validation failed", result.errors)

    for warning in result.warnings:
        logger.warning(warning)
    return result.config
