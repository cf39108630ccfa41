"""
Video Frame Source - Timestamp-addressable frames from a video file via OpenCV.
"""

import logging

import cv2
import numpy as np

from ..exceptions import AdapterError

logger = logging.getLogger(__name__)


class VideoFrameSource:
    """
    Seekable video file.

    Usage:
        with VideoFrameSource("clip.mp4") as source:
            frame = source.seek(1.5)
    """

    def __init__(self, path: str):
        self.path = path
        self._cap = cv2.VideoCapture(path)
        if not self._cap.isOpened():
            raise AdapterError(f"Cannot open video: {path}")

        self.fps = self._cap.get(cv2.CAP_PROP_FPS) or 0.0
        self.frame_count = int(self._cap.get(cv2.CAP_PROP_FRAME_COUNT) or 0)
        self.width = int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        self.height = int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        logger.info(
            f"Video opened: {path} ({self.width}x{self.height}, "
            f"{self.fps:.1f} fps, {self.duration:.1f}s)"
        )

    @property
    def duration(self) -> float:
        if self.fps <= 0:
            return 0.0
        return self.frame_count / self.fps

    def seek(self, timestamp: float) -> np.ndarray:
        """
        Decode the frame at timestamp.

        Returns:
            BGR frame

        Raises:
            AdapterError: If the frame cannot be read
        """
        self._cap.set(cv2.CAP_PROP_POS_MSEC, timestamp * 1000.0)
        ret, frame = self._cap.read()
        if not ret:
            raise AdapterError(f"Failed to read frame at {timestamp:.2f}s from {self.path}")
        return frame

    def close(self) -> None:
        self._cap.release()

    def __enter__(self) -> "VideoFrameSource":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
