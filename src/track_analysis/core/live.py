"""
Live Detection Driver - Frame-by-frame tracking while media plays.

Shares the tracker with the offline orchestrator. The two never feed the
tracker at the same time: live updates are skipped whenever the
orchestrator has a run in flight or a finished session on screen.
"""

import logging
from typing import Any

from ..models import AnalysisMode, Detector, Track
from ..utils.constants import DEFAULT_MIN_CONFIDENCE
from .detections import filter_detections
from .orchestrator import AnalysisOrchestrator
from .tracker import Tracker

logger = logging.getLogger(__name__)


class LiveDetectionDriver:
    """
    Runs detect -> filter -> track on single frames.

    No refinement is done in live mode.
    """

    def __init__(
        self,
        tracker: Tracker,
        detector: Detector,
        orchestrator: AnalysisOrchestrator | None = None,
        min_confidence: float = DEFAULT_MIN_CONFIDENCE,
    ):
        if orchestrator is not None and orchestrator.tracker is not tracker:
            raise ValueError("Live driver and orchestrator must share one tracker")
        self.tracker = tracker
        self.detector = detector
        self.orchestrator = orchestrator
        self.min_confidence = min_confidence

    @property
    def active(self) -> bool:
        """True when live updates may touch the tracker."""
        if self.orchestrator is None:
            return True
        return self.orchestrator.mode == AnalysisMode.IDLE

    def process_frame(self, frame: Any, timestamp: float = 0.0) -> tuple[Track, ...]:
        """
        Track one frame.

        Args:
            frame: Frame handle for the detector
            timestamp: Media time in seconds

        Returns:
            Live tracks, or an empty tuple while the orchestrator owns the tracker
        """
        if not self.active:
            logger.debug(f"Live detection suspended (mode={self.orchestrator.mode.value})")
            return ()

        detections = filter_detections(self.detector.detect(frame), self.min_confidence)
        return self.tracker.update(detections, timestamp)

    def reset(self) -> None:
        """Forget live tracks, e.g. after a seek. Skipped while the orchestrator owns the tracker."""
        if self.active:
            self.tracker.reset()
