"""
YOLO Detector Adapter - ultralytics detection model behind the Detector protocol.
"""

import logging

import numpy as np
import torch
from ultralytics import YOLO

from ..exceptions import AdapterError
from ..models import Detection

logger = logging.getLogger(__name__)


def resolve_device(device: str = "auto") -> str:
    """Pick cuda when available for 'auto'."""
    if device != "auto":
        return device
    return "cuda" if torch.cuda.is_available() else "cpu"


def load_yolo_model(model_file: str, device: str = "auto") -> YOLO:
    """
    Load a YOLO model on the best available device.

    Raises:
        AdapterError: If the model cannot be loaded
    """
    device = resolve_device(device)
    try:
        model = YOLO(model_file)
        model.to(device)
    except Exception as e:
        raise AdapterError(f"Failed to load model {model_file}: {e}") from e

    logger.info(f"Model initialized: {model_file}")
    logger.info(f"Device: {device}")
    if device == "cuda":
        logger.info(f"GPU: {torch.cuda.get_device_name(0)}")
    else:
        logger.warning("Running on CPU - performance will be slow")
    return model


class YoloDetector:
    """
    Runs a YOLO detection model on full frames.

    Holds no per-call state: every detect() is an independent predict().
    """

    def __init__(self, model, device: str = "auto"):
        self.model = model
        self.device = resolve_device(device)

    @classmethod
    def from_model_file(cls, model_file: str, device: str = "auto") -> "YoloDetector":
        return cls(load_yolo_model(model_file, device), device)

    def detect(self, frame: np.ndarray) -> list[Detection]:
        """
        Detect objects in a BGR frame.

        Returns:
            Detections with (x, y, w, h) boxes and COCO class names

        Raises:
            AdapterError: If inference fails
        """
        try:
            results = self.model.predict(source=frame, device=self.device, verbose=False)
        except Exception as e:
            raise AdapterError(f"YOLO inference failed: {e}") from e

        boxes = results[0].boxes
        if boxes is None or len(boxes) == 0:
            return []

        names = results[0].names
        xyxy = boxes.xyxy.cpu().numpy()
        scores = boxes.conf.cpu().numpy()
        classes = boxes.cls.int().cpu().tolist()

        detections = []
        for (x1, y1, x2, y2), score, class_id in zip(xyxy, scores, classes):
            detections.append(
                Detection(
                    bbox=(float(x1), float(y1), float(x2 - x1), float(y2 - y1)),
                    label=names[class_id],
                    score=float(score),
                )
            )
        return detections
