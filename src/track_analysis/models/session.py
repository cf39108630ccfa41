"""
Analysis session models - range, mode and the ordered frame records.
"""

from dataclasses import dataclass, field
from enum import Enum

from ..utils.constants import FRAME_LOOKUP_TOLERANCE
from .tracking import FrameRecord


class AnalysisMode(str, Enum):
    """Orchestrator lifecycle state."""

    IDLE = "idle"
    ANALYZING = "analyzing"
    PAUSED = "paused"
    DONE = "done"


@dataclass(frozen=True)
class AnalysisRange:
    """
    Time range to analyze, in seconds.

    Attributes:
        start: First sample time
        end: Exclusive end; None means the frame source's duration
    """

    start: float = 0.0
    end: float | None = None

    def resolve(self, duration: float) -> "AnalysisRange":
        """Fill an open end from the source duration."""
        if self.end is not None:
            return self
        return AnalysisRange(start=self.start, end=duration)

    @property
    def length(self) -> float:
        if self.end is None:
            return 0.0
        return self.end - self.start


@dataclass
class AnalysisSession:
    """
    Ordered record of per-frame tracking results over an analyzed range.

    Owned by the orchestrator. Frame records are immutable once appended.
    """

    range: AnalysisRange = field(default_factory=AnalysisRange)
    step: float = 0.0
    frames: list[FrameRecord] = field(default_factory=list)
    progress_percent: int = 0
    mode: AnalysisMode = AnalysisMode.IDLE

    def frame_at(
        self, timestamp: float, tolerance: float = FRAME_LOOKUP_TOLERANCE
    ) -> FrameRecord | None:
        """
        Find the recorded frame closest to timestamp.

        Args:
            timestamp: Seek time in seconds
            tolerance: Maximum distance in seconds to accept a frame

        Returns:
            Nearest FrameRecord, or None if none is within tolerance
        """
        best = None
        best_distance = tolerance
        for record in self.frames:
            distance = abs(record.timestamp - timestamp)
            if distance < best_distance:
                best = record
                best_distance = distance
        return best

    @property
    def frame_count(self) -> int:
        return len(self.frames)
