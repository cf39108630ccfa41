"""
Tracking data models - detections, live tracks, and their immutable projections.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ..exceptions import InputError

BBox = tuple[float, float, float, float]  # (x, y, w, h) in pixels


@dataclass(frozen=True)
class Detection:
    """
    One detector output for one frame.

    Attributes:
        bbox: (x, y, w, h) box in pixel space
        label: Detector label (raw) or taxonomy label (after mapping)
        score: Confidence in [0, 1]
    """

    bbox: BBox
    label: str
    score: float

    @classmethod
    def from_raw(cls, raw: "Detection | Mapping[str, Any]") -> "Detection":
        """
        Build a validated detection from a Detection or a detector dict.

        Dicts may name the label "label" or "class".

        Raises:
            InputError: If bbox, label or score is malformed
        """
        if isinstance(raw, Detection):
            bbox, label, score = raw.bbox, raw.label, raw.score
        elif isinstance(raw, Mapping):
            bbox = raw.get("bbox")
            label = raw.get("label", raw.get("class"))
            score = raw.get("score")
        else:
            raise InputError(f"Unsupported detection type: {type(raw).__name__}")

        return cls(bbox=_validate_bbox(bbox), label=_validate_label(label), score=_validate_score(score))

    def with_label(self, label: str) -> "Detection":
        """Copy of this detection under another label."""
        return Detection(bbox=self.bbox, label=label, score=self.score)


def _validate_bbox(bbox: Any) -> BBox:
    try:
        values = tuple(float(v) for v in bbox)
    except (TypeError, ValueError) as e:
        raise InputError(f"Invalid bbox {bbox!r}: {e}") from e
    if len(values) != 4:
        raise InputError(f"Invalid bbox {bbox!r}: expected 4 values")
    if not all(math.isfinite(v) for v in values):
        raise InputError(f"Invalid bbox {bbox!r}: non-finite coordinate")
    if values[2] < 0 or values[3] < 0:
        raise InputError(f"Invalid bbox {bbox!r}: negative size")
    return values


def _validate_label(label: Any) -> str:
    if not isinstance(label, str) or not label.strip():
        raise InputError(f"Invalid label {label!r}")
    return label


def _validate_score(score: Any) -> float:
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise InputError(f"Invalid score {score!r}")
    if not math.isfinite(score) or not 0.0 <= score <= 1.0:
        raise InputError(f"Score out of range: {score!r}")
    return float(score)


@dataclass
class Track:
    """
    A live track, owned by the Tracker.

    Attributes:
        id: Tracker-unique identifier, never reused until reset
        bbox: Last matched box
        label: Taxonomy label
        score: Last matched confidence
        max_score: Highest confidence seen so far
        first_seen_at: Timestamp of the creating detection
        missed_frames: Consecutive updates without a match
        color_tag: Display color assigned at creation
        refined: True once secondary classification has been applied
    """

    id: int
    bbox: BBox
    label: str
    score: float
    max_score: float
    first_seen_at: float
    missed_frames: int = 0
    color_tag: str = ""
    refined: bool = False

    def match(self, detection: Detection) -> None:
        """Take the measurement of a matched detection."""
        self.bbox = detection.bbox
        self.score = detection.score
        self.max_score = max(self.max_score, detection.score)
        self.missed_frames = 0

    def snapshot(self) -> "TrackSnapshot":
        """Immutable copy for a frame record."""
        return TrackSnapshot(
            id=self.id,
            bbox=tuple(self.bbox),
            label=self.label,
            score=self.score,
            max_score=self.max_score,
            first_seen_at=self.first_seen_at,
            color_tag=self.color_tag,
            refined=self.refined,
        )


@dataclass(frozen=True)
class TrackSnapshot:
    """Track state as recorded in a FrameRecord."""

    id: int
    bbox: BBox
    label: str
    score: float
    max_score: float
    first_seen_at: float
    color_tag: str
    refined: bool = False

    def __post_init__(self):
        object.__setattr__(self, "bbox", tuple(self.bbox))

    def to_dict(self) -> dict[str, Any]:
        """Session file representation (field order is the file order)."""
        return {
            "id": self.id,
            "bbox": list(self.bbox),
            "label": self.label,
            "score": self.score,
            "maxScore": self.max_score,
            "firstSeenAt": self.first_seen_at,
            "colorTag": self.color_tag,
            "refined": self.refined,
        }


@dataclass(frozen=True)
class FrameRecord:
    """Tracks present at one analyzed timestamp."""

    timestamp: float
    tracks: tuple[TrackSnapshot, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "tracks", tuple(self.tracks))

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "tracks": [t.to_dict() for t in self.tracks],
        }

    def track_ids(self) -> list[int]:
        return [t.id for t in self.tracks]


@dataclass(frozen=True)
class TrackSummary:
    """
    Session-wide view of one track id.

    Derived from FrameRecords, never stored on its own.
    """

    id: int
    label: str
    color_tag: str
    first_seen_at: float
    max_score: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "colorTag": self.color_tag,
            "firstSeenAt": self.first_seen_at,
            "maxScore": self.max_score,
        }
