"""
Consolidated data models for tracking and analysis.

This package contains all core data structures used across the application.
"""

from .adapters import Detector, FrameSource, RawDetection, SecondaryClassifier
from .session import AnalysisMode, AnalysisRange, AnalysisSession
from .tracking import (
    BBox,
    Detection,
    FrameRecord,
    Track,
    TrackSnapshot,
    TrackSummary,
)

__all__ = [
    # Session models
    "AnalysisMode",
    "AnalysisRange",
    "AnalysisSession",
    # Tracking models
    "BBox",
    "Detection",
    # Protocols
    "Detector",
    "FrameRecord",
    "FrameSource",
    "RawDetection",
    "SecondaryClassifier",
    "Track",
    "TrackSnapshot",
    "TrackSummary",
]
