"""
Configuration loading and validation.

- load_config: Find, parse and validate config.yaml (env overrides applied)
- validate_config: Validation with errors/warnings
- Config: Pydantic schema of the complete configuration
"""

from .loader import (
    ConfigValidationError,
    find_config_file,
    load_config,
    load_config_with_env,
    read_config_file,
)
from .schemas import (
    AnalysisConfig,
    Config,
    DetectionConfig,
    OutputConfig,
    RefinementConfig,
    TrackingConfig,
    validate_config_pydantic,
)
from .validator import ValidationResult, print_validation_result, validate_config

__all__ = [
    "AnalysisConfig",
    "Config",
    "ConfigValidationError",
    "DetectionConfig",
    "OutputConfig",
    "RefinementConfig",
    "TrackingConfig",
    "ValidationResult",
    "find_config_file",
    "load_config",
    "load_config_with_env",
    "print_validation_result",
    "read_config_file",
    "validate_config",
    "validate_config_pydantic",
]
