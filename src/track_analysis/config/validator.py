"""
Configuration Validator - Validates config syntax and semantic correctness.

Wraps the pydantic schemas and adds checks that need the filesystem.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from .schemas import Config, validate_config_pydantic

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of config validation."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    config: Config | None = None


def validate_config(config: dict) -> ValidationResult:
    """
    Validate a raw config dictionary.

    Args:
        config: Configuration dictionary (after env overrides)

    Returns:
        ValidationResult with errors, warnings and the parsed Config if valid
    """
    result = ValidationResult(valid=True)

    try:
        parsed = validate_config_pydantic(config)
    except ValidationError as e:
        result.valid = False
        result.errors.extend(_format_error(err) for err in e.errors())
        return result

    result.config = parsed
    _check_model_files(parsed, result)
    return result


def _format_error(err: dict) -> str:
    location = ".".join(str(part) for part in err.get("loc", ())) or "config"
    return f"{location}: {err.get('msg', 'invalid value')}"


def _check_model_files(config: Config, result: ValidationResult) -> None:
    """Missing model files are warnings - ultralytics downloads known models."""
    if not Path(config.detection.model_file).exists():
        result.warnings.append(
            f"Model file not found: {config.detection.model_file} (will be downloaded if valid)"
        )

    refinement = config.refinement
    if refinement.enabled and refinement.backend == "model":
        if not Path(refinement.model_file).exists():
            result.warnings.append(
                f"Classifier model not found: {refinement.model_file} (will be downloaded if valid)"
            )


def print_validation_result(result: ValidationResult) -> None:
    """Print validation errors and warnings to the console."""
    status = "VALID" if result.valid else "INVALID"
    print(f"\nConfiguration: {status}")
    for error in result.errors:
        print(f"  ERROR: {error}")
    for warning in result.warnings:
        print(f"  WARNING: {warning}")
    print()
