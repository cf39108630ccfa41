"""
IoU Tracker - Greedy same-label IoU matching across frames.

Keeps the live track set for one media source. Each update ages every
track, matches detections to tracks by overlap, spawns tracks for the
leftovers and prunes tracks that have been missing for too long.

Not thread-safe: exactly one driver (live or offline) may call update().
"""

import logging
from collections.abc import Sequence

from ..models import BBox, Detection, Track
from ..utils.constants import DEFAULT_IOU_THRESHOLD, DEFAULT_MAX_MISSED_FRAMES
from .colors import ColorAssigner, RandomHueColors

logger = logging.getLogger(__name__)

FIRST_TRACK_ID = 1


def iou(box_a: BBox, box_b: BBox) -> float:
    """
    Intersection over union of two (x, y, w, h) boxes.

    Returns:
        Overlap ratio in [0, 1]; 0 when the union area is 0
    """
    ax, ay, aw, ah = box_a
    bx, by, bw, bh = box_b

    inter_w = max(0.0, min(ax + aw, bx + bw) - max(ax, bx))
    inter_h = max(0.0, min(ay + ah, by + bh) - max(ay, by))
    inter_area = inter_w * inter_h

    union_area = aw * ah + bw * bh - inter_area
    if union_area <= 0:
        return 0.0
    return inter_area / union_area


class Tracker:
    """
    Multi-object tracker assigning persistent ids to detections.

    Attributes:
        iou_threshold: Minimum overlap (exclusive) for a track/detection match
        max_missed_frames: Tracks missing for more updates than this are dropped
    """

    def __init__(
        self,
        iou_threshold: float = DEFAULT_IOU_THRESHOLD,
        max_missed_frames: int = DEFAULT_MAX_MISSED_FRAMES,
        color_assigner: ColorAssigner | None = None,
    ):
        self.iou_threshold = iou_threshold
        self.max_missed_frames = max_missed_frames
        self._assign_color = color_assigner or RandomHueColors()
        self._tracks: list[Track] = []
        self._next_id = FIRST_TRACK_ID

    @property
    def tracks(self) -> tuple[Track, ...]:
        """Read-only view of the live tracks, in creation order."""
        return tuple(self._tracks)

    def update(
        self, detections: Sequence[Detection], timestamp: float = 0.0
    ) -> tuple[Track, ...]:
        """
        Consume one frame's taxonomy-labelled detections.

        Args:
            detections: Detections already filtered by the schema mapper
            timestamp: Frame time in seconds (used for new tracks)

        Returns:
            Live tracks after matching, spawning and pruning
        """
        for track in self._tracks:
            track.missed_frames += 1

        used_tracks: set[int] = set()
        used_detections: set[int] = set()

        for _, track_idx, det_idx in self._candidate_pairs(detections):
            if track_idx in used_tracks or det_idx in used_detections:
                continue
            self._tracks[track_idx].match(detections[det_idx])
            used_tracks.add(track_idx)
            used_detections.add(det_idx)

        for det_idx, detection in enumerate(detections):
            if det_idx not in used_detections:
                self._spawn(detection, timestamp)

        self._prune()
        return self.tracks

    def _candidate_pairs(
        self, detections: Sequence[Detection]
    ) -> list[tuple[float, int, int]]:
        """
        Same-label pairs above the IoU threshold, best first.

        Equal overlaps fall back to lowest track id, then detection order.
        """
        candidates = []
        for track_idx, track in enumerate(self._tracks):
            for det_idx, detection in enumerate(detections):
                if track.label != detection.label:
                    continue
                overlap = iou(track.bbox, detection.bbox)
                if overlap > self.iou_threshold:
                    candidates.append((overlap, track_idx, det_idx))

        candidates.sort(key=lambda c: (-c[0], self._tracks[c[1]].id, c[2]))
        return candidates

    def _spawn(self, detection: Detection, timestamp: float) -> Track:
        track = Track(
            id=self._next_id,
            bbox=detection.bbox,
            label=detection.label,
            score=detection.score,
            max_score=detection.score,
            first_seen_at=timestamp,
            missed_frames=0,
            color_tag=self._assign_color(),
        )
        self._next_id += 1
        self._tracks.append(track)
        logger.debug(f"New track {track.id} ({track.label}) at {timestamp:.2f}s")
        return track

    def _prune(self) -> None:
        kept = []
        for track in self._tracks:
            if track.missed_frames > self.max_missed_frames:
                logger.debug(f"Track {track.id} ({track.label}) lost")
            else:
                kept.append(track)
        self._tracks = kept

    def apply_refinement(self, track_id: int, label: str) -> None:
        """
        Record the outcome of secondary classification for a live track.

        Sets the (possibly unchanged) label and marks the track refined.
        """
        for track in self._tracks:
            if track.id == track_id:
                track.label = label
                track.refined = True
                return
        logger.debug(f"Refinement for unknown track {track_id} ignored")

    def reset(self) -> None:
        """Drop all tracks and restart ids. Use when switching media source."""
        self._tracks = []
        self._next_id = FIRST_TRACK_ID
