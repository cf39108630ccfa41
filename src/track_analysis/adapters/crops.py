"""
Crop helpers shared by the secondary classifier adapters.
"""

import numpy as np

from ..models import BBox
from ..utils.constants import MIN_CLASSIFY_CROP_SIZE


def crop_for_classification(
    frame: np.ndarray, bbox: BBox, min_size: int = MIN_CLASSIFY_CROP_SIZE
) -> np.ndarray | None:
    """
    Cut the bbox region out of frame.

    Returns:
        The crop, or None if the box is smaller than min_size on either side
        or lies outside the frame
    """
    x, y, w, h = (int(v) for v in bbox)
    if w < min_size or h < min_size:
        return None

    frame_h, frame_w = frame.shape[:2]
    x1, y1 = max(x, 0), max(y, 0)
    x2, y2 = min(x + w, frame_w), min(y + h, frame_h)
    if x2 <= x1 or y2 <= y1:
        return None
    return frame[y1:y2, x1:x2]


def clean_class_name(name: str) -> str:
    """First term of a class name: 'police_van, police wagon' -> 'police van'."""
    return name.replace("_", " ").split(",")[0].strip()
