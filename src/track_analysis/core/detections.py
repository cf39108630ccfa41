"""
Detection filtering - validation, confidence gate and schema mapping.

Shared by the offline orchestrator and the live driver so both feed the
tracker exactly the same way.
"""

import logging
from collections.abc import Iterable

from ..exceptions import InputError
from ..models import Detection, RawDetection
from ..utils.constants import DEFAULT_MIN_CONFIDENCE
from .schema import map_coco_to_schema

logger = logging.getLogger(__name__)


def filter_detections(
    raw_detections: Iterable[RawDetection],
    min_confidence: float = DEFAULT_MIN_CONFIDENCE,
) -> list[Detection]:
    """
    Turn raw detector output into tracker input.

    Malformed detections are skipped with a warning. Detections below
    min_confidence or without a taxonomy label are dropped.

    Args:
        raw_detections: Detector output (Detection objects or dicts)
        min_confidence: Minimum score to keep a detection

    Returns:
        Validated detections relabelled to the taxonomy, in input order
    """
    filtered = []
    for raw in raw_detections:
        try:
            detection = Detection.from_raw(raw)
        except InputError as e:
            logger.warning(f"Skipping malformed detection: {e}")
            continue

        if detection.score < min_confidence:
            continue

        schema_label = map_coco_to_schema(detection.label)
        if schema_label is None:
            continue

        filtered.append(detection.with_label(schema_label))

    return filtered
