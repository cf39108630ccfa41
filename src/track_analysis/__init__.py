"""
Track Analysis System

Turns per-frame object detections into identity-persistent tracks,
classified into a fixed taxonomy, optionally refined by a secondary
classifier, and collected into a replayable analysis session.

Package structure:
  core/       - Tracker, schema and refinement rules, orchestrator, signal heuristic
  models/     - Data models and adapter protocols
  session/    - Session codec and track summaries
  adapters/   - YOLO, HTTP and OpenCV adapters
  config/     - Configuration loading and validation
  utils/      - Constants
"""

__version__ = "1.0.0"

from .core import (
    TAXONOMY,
    AnalysisOrchestrator,
    LiveDetectionDriver,
    Tracker,
    classify_signal,
    iou,
    map_coco_to_schema,
    refine_schema_label,
)
from .exceptions import AdapterError, FormatError, InputError, TrackAnalysisError
from .models import (
    AnalysisMode,
    AnalysisRange,
    AnalysisSession,
    Detection,
    FrameRecord,
    TrackSummary,
)
from .session import deserialize_session, serialize_session, summarize_frames

__all__ = [
    "TAXONOMY",
    "AdapterError",
    # Core
    "AnalysisMode",
    "AnalysisOrchestrator",
    "AnalysisRange",
    "AnalysisSession",
    "Detection",
    "FormatError",
    "FrameRecord",
    "InputError",
    "LiveDetectionDriver",
    "TrackAnalysisError",
    "TrackSummary",
    "Tracker",
    "classify_signal",
    "deserialize_session",
    "iou",
    "map_coco_to_schema",
    "refine_schema_label",
    "serialize_session",
    "summarize_frames",
]
