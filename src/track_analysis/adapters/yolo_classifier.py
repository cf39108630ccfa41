"""
YOLO Classifier Adapter - ultralytics classification model for label refinement.

ImageNet-trained classifiers know the fine-grained vehicle classes the
refinement rules look for (ambulance, police van, minivan, golfcart, moped).
"""

import logging

import numpy as np

from ..exceptions import AdapterError
from ..models import BBox
from ..utils.constants import MIN_CLASSIFY_CROP_SIZE
from .crops import clean_class_name, crop_for_classification
from .yolo_detector import load_yolo_model, resolve_device

logger = logging.getLogger(__name__)


class YoloClassifier:
    """Top-1 class name of a track crop."""

    def __init__(
        self, model, device: str = "auto", min_crop_size: int = MIN_CLASSIFY_CROP_SIZE
    ):
        self.model = model
        self.device = resolve_device(device)
        self.min_crop_size = min_crop_size

    @classmethod
    def from_model_file(
        cls,
        model_file: str,
        device: str = "auto",
        min_crop_size: int = MIN_CLASSIFY_CROP_SIZE,
    ) -> "YoloClassifier":
        return cls(load_yolo_model(model_file, device), device, min_crop_size)

    def classify(self, frame: np.ndarray, bbox: BBox) -> str | None:
        """
        Classify the bbox crop.

        Returns:
            Cleaned top-1 class name, or None for crops below the minimum size

        Raises:
            AdapterError: If inference fails
        """
        crop = crop_for_classification(frame, bbox, self.min_crop_size)
        if crop is None:
            return None

        try:
            results = self.model.predict(source=crop, device=self.device, verbose=False)
        except Exception as e:
            raise AdapterError(f"Classifier inference failed: {e}") from e

        probs = results[0].probs
        if probs is None:
            return None

        name = clean_class_name(results[0].names[int(probs.top1)])
        logger.debug(f"Classified crop {bbox} as '{name}' ({float(probs.top1conf):.2f})")
        return name
