"""
Session Codec - YAML save/load of analysis sessions.

File format: a YAML sequence of frame records, each
    {timestamp, tracks: [{id, bbox, label, score, maxScore,
                          firstSeenAt, colorTag, refined}, ...]}
Order is preserved on both sides. Loading never re-runs tracking or
refinement; the session comes back as DONE.
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from ..exceptions import FormatError
from ..models import (
    AnalysisMode,
    AnalysisRange,
    AnalysisSession,
    FrameRecord,
    TrackSnapshot,
)
from ..utils.constants import DEFAULT_COLOR_TAG

logger = logging.getLogger(__name__)

REQUIRED_TRACK_KEYS = ("id", "bbox", "label", "score")


def serialize_session(session: AnalysisSession) -> str:
    """Encode the session's frame records as YAML text."""
    data = [record.to_dict() for record in session.frames]
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=None)


def deserialize_session(text: str) -> AnalysisSession:
    """
    Decode YAML text into a finished session.

    Args:
        text: Output of serialize_session (or a hand-edited equivalent)

    Returns:
        AnalysisSession with mode DONE and progress 100

    Raises:
        FormatError: If the text is not a sequence of frame-shaped records
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise FormatError(f"Invalid YAML: {e}") from e

    if not isinstance(data, list):
        raise FormatError(
            f"Session root must be a sequence of frames, got {type(data).__name__}"
        )

    frames = [_parse_frame(item, index) for index, item in enumerate(data)]
    return AnalysisSession(
        range=_derive_range(frames),
        step=_derive_step(frames),
        frames=frames,
        progress_percent=100,
        mode=AnalysisMode.DONE,
    )


def save_session(session: AnalysisSession, path: str | Path) -> Path:
    """Write the session to a YAML file, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize_session(session), encoding="utf-8")
    logger.info(f"Session saved: {path} ({session.frame_count} frames)")
    return path


def load_session(path: str | Path) -> AnalysisSession:
    """
    Read a session file.

    Raises:
        FormatError: If the file content is not a valid session
    """
    path = Path(path)
    session = deserialize_session(path.read_text(encoding="utf-8"))
    logger.info(f"Session loaded from {path} ({session.frame_count} frames)")
    return session


def _parse_frame(item: Any, index: int) -> FrameRecord:
    if not isinstance(item, Mapping):
        raise FormatError(f"Frame {index} is not a mapping")

    timestamp = item.get("timestamp")
    if not _is_number(timestamp):
        raise FormatError(f"Frame {index} has no numeric timestamp")

    tracks = item.get("tracks")
    if not isinstance(tracks, list):
        raise FormatError(f"Frame {index} has no track list")

    return FrameRecord(
        timestamp=timestamp,
        tracks=tuple(_parse_track(t, index) for t in tracks),
    )


def _parse_track(item: Any, frame_index: int) -> TrackSnapshot:
    if not isinstance(item, Mapping):
        raise FormatError(f"Frame {frame_index}: track is not a mapping")

    missing = [key for key in REQUIRED_TRACK_KEYS if key not in item]
    if missing:
        raise FormatError(f"Frame {frame_index}: track missing {', '.join(missing)}")

    bbox = item["bbox"]
    if not isinstance(bbox, list) or len(bbox) != 4 or not all(map(_is_number, bbox)):
        raise FormatError(f"Frame {frame_index}: invalid bbox {bbox!r}")

    track_id = item["id"]
    if isinstance(track_id, bool) or not isinstance(track_id, int):
        raise FormatError(f"Frame {frame_index}: invalid track id {track_id!r}")

    label = item["label"]
    if not isinstance(label, str) or not label:
        raise FormatError(f"Frame {frame_index}: invalid label {label!r}")

    score = item["score"]
    if not _is_number(score):
        raise FormatError(f"Frame {frame_index}: invalid score {score!r}")

    # Optional keys may be absent, but not present with the wrong type
    max_score = item.get("maxScore", score)
    first_seen_at = item.get("firstSeenAt", 0.0)
    for key, value in (("maxScore", max_score), ("firstSeenAt", first_seen_at)):
        if not _is_number(value):
            raise FormatError(f"Frame {frame_index}: invalid {key} {value!r}")

    refined = item.get("refined", False)
    if not isinstance(refined, bool):
        raise FormatError(f"Frame {frame_index}: invalid refined flag {refined!r}")

    color_tag = item.get("colorTag")
    if color_tag is not None and not isinstance(color_tag, str):
        raise FormatError(f"Frame {frame_index}: invalid colorTag {color_tag!r}")

    return TrackSnapshot(
        id=track_id,
        bbox=tuple(bbox),
        label=label,
        score=score,
        max_score=max_score,
        first_seen_at=first_seen_at,
        color_tag=color_tag or DEFAULT_COLOR_TAG,
        refined=refined,
    )


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _derive_range(frames: list[FrameRecord]) -> AnalysisRange:
    if not frames:
        return AnalysisRange(start=0.0, end=0.0)
    return AnalysisRange(start=frames[0].timestamp, end=frames[-1].timestamp)


def _derive_step(frames: list[FrameRecord]) -> float:
    if len(frames) < 2:
        return 0.0
    return round(frames[1].timestamp - frames[0].timestamp, 6)
