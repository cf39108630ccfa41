"""
HTTP Classifier Adapter - Sends track crops to a remote classification service.

Request:  POST {"image": <base64 JPEG>, "bbox": [x, y, w, h]}
Response: {"label": "<free text>"}
"""

import base64
import logging

import cv2
import numpy as np
import requests

from ..exceptions import AdapterError
from ..models import BBox
from ..utils.constants import MIN_CLASSIFY_CROP_SIZE
from .crops import clean_class_name, crop_for_classification

logger = logging.getLogger(__name__)


class HttpClassifier:
    """
    Remote secondary classifier.

    Failures are raised as AdapterError; retrying is left to the caller.
    """

    def __init__(
        self,
        analyzer_url: str,
        timeout: float = 30,
        min_crop_size: int = MIN_CLASSIFY_CROP_SIZE,
    ):
        self.analyzer_url = analyzer_url
        self.timeout = timeout
        self.min_crop_size = min_crop_size

    def classify(self, frame: np.ndarray, bbox: BBox) -> str | None:
        """
        Classify the bbox crop remotely.

        Returns:
            Cleaned label text, None for small crops or an empty answer

        Raises:
            AdapterError: On encoding, transport or response errors
        """
        crop = crop_for_classification(frame, bbox, self.min_crop_size)
        if crop is None:
            return None

        ok, encoded = cv2.imencode(".jpg", crop)
        if not ok:
            raise AdapterError("Failed to encode crop as JPEG")

        payload = {
            "image": base64.b64encode(encoded.tobytes()).decode("utf-8"),
            "bbox": [float(v) for v in bbox],
        }

        try:
            response = requests.post(
                self.analyzer_url,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise AdapterError(f"Classifier timeout after {self.timeout}s") from e
        except requests.RequestException as e:
            raise AdapterError(f"Classifier request failed: {e}") from e

        if not response.ok:
            raise AdapterError(
                f"Classifier returned {response.status_code}: {response.text[:100]}"
            )

        try:
            label = response.json().get("label")
        except ValueError as e:
            raise AdapterError(f"Invalid JSON response: {e}") from e

        if not label:
            logger.debug("Classifier returned empty label")
            return None
        return clean_class_name(label)
