"""
Pydantic schemas for configuration validation.

Provides type-safe, declarative validation with clear error messages.
Every field has a default, so an empty config file is valid.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..core.schema import TAXONOMY
from ..utils.constants import (
    DEFAULT_ANALYSIS_STEP,
    DEFAULT_IOU_THRESHOLD,
    DEFAULT_MAX_MISSED_FRAMES,
    DEFAULT_MIN_CONFIDENCE,
    DEFAULT_PAUSE_POLL_INTERVAL,
    DEFAULT_SESSION_DIR,
    MIN_CLASSIFY_CROP_SIZE,
    REFINEMENT_LABELS,
    REFINEMENT_MIN_SCORE,
)


class StrictModel(BaseModel):
    """Base model that rejects unknown fields."""

    model_config = ConfigDict(extra="forbid")


class DetectionConfig(StrictModel):
    """Object detector settings."""

    model_file: str = Field(default="yolov8n.pt", description="YOLO model file (.pt)")
    min_confidence: float = Field(
        default=DEFAULT_MIN_CONFIDENCE, ge=0.0, le=1.0, description="Detection score gate"
    )
    device: Literal["auto", "cpu", "cuda"] = "auto"

    @field_validator("model_file")
    @classmethod
    def validate_model_file(cls, v: str) -> str:
        if not v.endswith(".pt"):
            raise ValueError("Model file must be .pt format")
        return v


class TrackingConfig(StrictModel):
    """Tracker settings."""

    iou_threshold: float = Field(default=DEFAULT_IOU_THRESHOLD, ge=0.0, le=1.0)
    max_missed_frames: int = Field(default=DEFAULT_MAX_MISSED_FRAMES, ge=0)
    color_seed: int | None = Field(
        default=None, description="Seed for reproducible track colors"
    )


class RefinementConfig(StrictModel):
    """Secondary classification settings."""

    enabled: bool = True
    backend: Literal["model", "http"] = "model"
    model_file: str = Field(default="yolov8n-cls.pt", description="Classification model")
    analyzer_url: str | None = Field(default=None, description="HTTP classifier endpoint")
    timeout_seconds: float = Field(default=30, gt=0)
    labels: list[str] = Field(default_factory=lambda: list(REFINEMENT_LABELS))
    min_score: float = Field(default=REFINEMENT_MIN_SCORE, ge=0.0, le=1.0)
    min_crop_size: int = Field(default=MIN_CLASSIFY_CROP_SIZE, ge=1)

    @field_validator("labels")
    @classmethod
    def validate_labels(cls, v: list[str]) -> list[str]:
        unknown = [label for label in v if label not in TAXONOMY]
        if unknown:
            raise ValueError(f"Unknown taxonomy labels: {', '.join(unknown)}")
        return v

    @model_validator(mode="after")
    def validate_backend(self):
        if self.enabled and self.backend == "http" and not self.analyzer_url:
            raise ValueError("analyzer_url is required for the http backend")
        return self


class AnalysisConfig(StrictModel):
    """Offline analysis loop settings."""

    step_seconds: float = Field(default=DEFAULT_ANALYSIS_STEP, gt=0)
    pause_poll_seconds: float = Field(default=DEFAULT_PAUSE_POLL_INTERVAL, gt=0)


class OutputConfig(StrictModel):
    """Output settings."""

    session_dir: str = DEFAULT_SESSION_DIR


class Config(StrictModel):
    """Complete configuration."""

    detection: DetectionConfig = Field(default_factory=DetectionConfig)
    tracking: TrackingConfig = Field(default_factory=TrackingConfig)
    refinement: RefinementConfig = Field(default_factory=RefinementConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


def validate_config_pydantic(config: dict) -> Config:
    """
    Validate config dict using Pydantic schemas.

    Args:
        config: Raw config dictionary

    Returns:
        Validated Config object

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return Config.model_validate(config or {})
