"""
Track summary reduction over frame records.

Summaries are never stored on their own: they are folded from the frames,
either incrementally while analyzing or in one pass after loading.
"""

from collections.abc import Iterable
from dataclasses import replace

from ..models import FrameRecord, TrackSummary


def accumulate_summary(
    table: dict[int, TrackSummary], record: FrameRecord
) -> dict[int, TrackSummary]:
    """
    Fold one frame record into a summary table.

    New ids are inserted, labels follow the latest frame, first_seen_at
    keeps the earliest value and max_score the running maximum.

    Args:
        table: Summaries so far, keyed by track id (not modified)
        record: Next frame record

    Returns:
        New summary table
    """
    updated = dict(table)
    for snapshot in record.tracks:
        existing = updated.get(snapshot.id)
        if existing is None:
            updated[snapshot.id] = TrackSummary(
                id=snapshot.id,
                label=snapshot.label,
                color_tag=snapshot.color_tag,
                first_seen_at=snapshot.first_seen_at,
                max_score=snapshot.max_score,
            )
        else:
            updated[snapshot.id] = replace(
                existing,
                label=snapshot.label,
                first_seen_at=min(existing.first_seen_at, snapshot.first_seen_at),
                max_score=max(existing.max_score, snapshot.max_score),
            )
    return updated


def summarize_frames(frames: Iterable[FrameRecord]) -> list[TrackSummary]:
    """Summaries for every track id in frames, in order of first appearance."""
    table: dict[int, TrackSummary] = {}
    for record in frames:
        table = accumulate_summary(table, record)
    return list(table.values())
