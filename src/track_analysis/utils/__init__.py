"""
Utility modules for constants.
"""

from .constants import (
    DEFAULT_ANALYSIS_STEP,
    DEFAULT_IOU_THRESHOLD,
    DEFAULT_MAX_MISSED_FRAMES,
    DEFAULT_MIN_CONFIDENCE,
    DEFAULT_PAUSE_POLL_INTERVAL,
    ENV_ANALYZER_URL,
    ENV_MODEL_FILE,
)

__all__ = [
    "DEFAULT_ANALYSIS_STEP",
    "DEFAULT_IOU_THRESHOLD",
    "DEFAULT_MAX_MISSED_FRAMES",
    "DEFAULT_MIN_CONFIDENCE",
    "DEFAULT_PAUSE_POLL_INTERVAL",
    "ENV_ANALYZER_URL",
    "ENV_MODEL_FILE",
]
