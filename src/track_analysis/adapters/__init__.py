"""
Concrete adapters for the external collaborators.

- YoloDetector: ultralytics detection model
- YoloClassifier / HttpClassifier: secondary classifiers for refinement
- VideoFrameSource: OpenCV video file
"""

from .http_classifier import HttpClassifier
from .video_source import VideoFrameSource
from .yolo_classifier import YoloClassifier
from .yolo_detector import YoloDetector, load_yolo_model, resolve_device

__all__ = [
    "HttpClassifier",
    "VideoFrameSource",
    "YoloClassifier",
    "YoloDetector",
    "load_yolo_model",
    "resolve_device",
]
