"""
Session persistence and replay.

- serialize_session / deserialize_session: YAML codec
- save_session / load_session: file helpers
- summarize_frames: track summaries recomputed from frame records
"""

from .codec import (
    deserialize_session,
    load_session,
    save_session,
    serialize_session,
)
from .summary import accumulate_summary, summarize_frames

__all__ = [
    "accumulate_summary",
    "deserialize_session",
    "load_session",
    "save_session",
    "serialize_session",
    "summarize_frames",
]
