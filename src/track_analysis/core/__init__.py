"""
Core tracking components.

This module contains the tracker, the schema and refinement rules,
the signal color heuristic and the analysis orchestrator.
"""

from .colors import PaletteColors, RandomHueColors
from .detections import filter_detections
from .live import LiveDetectionDriver
from .orchestrator import AnalysisOrchestrator, sample_times
from .schema import TAXONOMY, map_coco_to_schema, refine_schema_label
from .signal_light import SignalReading, classify_signal
from .tracker import Tracker, iou

__all__ = [
    "TAXONOMY",
    "AnalysisOrchestrator",
    "LiveDetectionDriver",
    "PaletteColors",
    "RandomHueColors",
    "SignalReading",
    "Tracker",
    "classify_signal",
    "filter_detections",
    "iou",
    "map_coco_to_schema",
    "refine_schema_label",
    "sample_times",
]
