"""
Adapter Protocols - Narrow contracts for the external collaborators.

The pipeline never touches a model or a video file directly. Anything
that satisfies these protocols (YOLO, an HTTP service, a test stub)
can drive the tracker and the orchestrator.

Example:
    orchestrator = AnalysisOrchestrator(
        frame_source=VideoFrameSource("clip.mp4"),
        detector=YoloDetector.from_model_file("yolov8n.pt"),
        classifier=None,
    )
"""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from .tracking import BBox, Detection

RawDetection = Detection | Mapping[str, Any]


class Detector(Protocol):
    """Object detector. Must keep no per-call state visible to the pipeline."""

    def detect(self, frame: Any) -> Sequence[RawDetection]:
        """
        Detect objects in a frame.

        Args:
            frame: Frame handle returned by FrameSource.seek

        Returns:
            Raw detections with bbox (x, y, w, h), detector label and score

        Raises:
            AdapterError: If the detector call fails
        """
        ...


class SecondaryClassifier(Protocol):
    """Fine-grained classifier used for label refinement."""

    def classify(self, frame: Any, bbox: BBox) -> str | None:
        """
        Classify the crop of frame at bbox.

        Returns:
            Free-text label, or None for crops below the minimum size

        Raises:
            AdapterError: If the classifier call fails
        """
        ...


class FrameSource(Protocol):
    """Timestamp-addressable frame source (video file, stream buffer)."""

    @property
    def duration(self) -> float:
        """Total length in seconds."""
        ...

    def seek(self, timestamp: float) -> Any:
        """
        Position the source at timestamp.

        Returns:
            Frame handle at that position, once the source has arrived there

        Raises:
            AdapterError: If the source cannot be positioned
        """
        ...
