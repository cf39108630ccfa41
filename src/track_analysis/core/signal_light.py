"""
Traffic Signal Color Heuristic

Classifies the lit lamp of a traffic signal from its bounding box crop.
Signals are vertically stacked: red on top, yellow in the middle, green
at the bottom. Lit pixels are counted per zone with dominant-channel
tests and the busiest zone wins.

Stateless and independent of the tracker.
"""

import logging
from dataclasses import dataclass

import numpy as np

from ..exceptions import InputError
from ..models import BBox

logger = logging.getLogger(__name__)

# Pixels with all channels below this are ignored
DARK_THRESHOLD = 50
# Channel level a lamp color must exceed
LIT_CHANNEL_MIN = 100
# Winning zone needs at least this many lit pixels
MIN_LIT_PIXELS = 10

# Zones as fractions of box height (overlapping)
RED_ZONE_END = 0.5
YELLOW_ZONE = (0.3, 0.7)
GREEN_ZONE_START = 0.5

SIGNAL_HEX = {"red": "#FF0000", "yellow": "#FFD700", "green": "#00FF00"}


@dataclass(frozen=True)
class SignalReading:
    """Result of a signal classification."""

    color: str  # 'red', 'yellow', 'green' or 'unknown'
    confidence: float
    hex: str | None = None


UNKNOWN_SIGNAL = SignalReading(color="unknown", confidence=0.0)


def classify_signal(
    frame: np.ndarray, bbox: BBox, channel_order: str = "bgr"
) -> SignalReading:
    """
    Classify the signal state inside bbox.

    Args:
        frame: H x W x 3 (or 4) uint8 image
        bbox: (x, y, w, h) of the signal in frame pixels
        channel_order: 'bgr' (OpenCV frames) or 'rgb'

    Returns:
        SignalReading; confidence is the winning count over a third of the box area
    """
    if not isinstance(frame, np.ndarray) or frame.ndim != 3 or frame.shape[2] < 3:
        raise InputError("Frame must be an H x W x 3 image array")

    x, y, w, h = (int(v) for v in bbox)
    if w <= 0 or h <= 0:
        return UNKNOWN_SIGNAL

    region = _crop_padded(frame, x, y, w, h)
    if channel_order == "bgr":
        b, g, r = region[..., 0], region[..., 1], region[..., 2]
    elif channel_order == "rgb":
        r, g, b = region[..., 0], region[..., 1], region[..., 2]
    else:
        raise InputError(f"Unknown channel order: {channel_order}")

    rel_y = (np.arange(h, dtype=np.float64) / h)[:, None]
    lit = ~((r < DARK_THRESHOLD) & (g < DARK_THRESHOLD) & (b < DARK_THRESHOLD))

    red = lit & (rel_y < RED_ZONE_END) & (r > LIT_CHANNEL_MIN) & (r > g * 1.2) & (r > b * 1.2)
    yellow = (
        lit
        & (rel_y >= YELLOW_ZONE[0])
        & (rel_y <= YELLOW_ZONE[1])
        & (r > LIT_CHANNEL_MIN)
        & (g > LIT_CHANNEL_MIN)
        & (b < LIT_CHANNEL_MIN)
        & (np.abs(r - g) < 60)
    )
    green = lit & (rel_y > GREEN_ZONE_START) & (g > LIT_CHANNEL_MIN) & (g > r * 1.1)

    counts = {
        "red": int(red.sum()),
        "yellow": int(yellow.sum()),
        "green": int(green.sum()),
    }
    best = max(counts.values())
    if best < MIN_LIT_PIXELS:
        return UNKNOWN_SIGNAL

    # dict order breaks ties: red, then yellow, then green
    color = next(c for c, n in counts.items() if n == best)
    confidence = best / (w * h / 3)
    logger.debug(f"Signal {color} ({counts})")
    return SignalReading(color=color, confidence=confidence, hex=SIGNAL_HEX[color])


def _crop_padded(frame: np.ndarray, x: int, y: int, w: int, h: int) -> np.ndarray:
    """Crop w x h at (x, y); parts outside the frame read as black."""
    frame_h, frame_w = frame.shape[:2]
    region = np.zeros((h, w, 3), dtype=np.int32)

    x1, y1 = max(x, 0), max(y, 0)
    x2, y2 = min(x + w, frame_w), min(y + h, frame_h)
    if x2 > x1 and y2 > y1:
        region[y1 - y : y2 - y, x1 - x : x2 - x] = frame[y1:y2, x1:x2, :3]
    return region
