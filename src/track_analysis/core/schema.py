"""
Schema Mapping - Detector labels to the fixed taxonomy, and label refinement.

Stage one maps a raw COCO label to a taxonomy label (or drops it).
Stage two narrows a coarse taxonomy label using the free-text output of a
secondary classifier. Both are pure functions.
"""

# Closed output taxonomy
TAXONOMY = (
    "Animal",
    "Cyclist",
    "Golf-Cart",
    "Motorcycle",
    "Pedestrian",
    "Van",
    "Truck",
    "Vehicle",
    "Emergency-Vehicle",
    "Scooter",
    "Bus",
    "Unknown",
)

ANIMAL_CLASSES = frozenset(
    {"bird", "cat", "dog", "horse", "sheep", "cow", "elephant", "bear", "zebra", "giraffe"}
)

COCO_TO_SCHEMA = {
    "person": "Pedestrian",
    "bicycle": "Cyclist",
    "motorcycle": "Motorcycle",
    "bus": "Bus",
    "truck": "Truck",
    "car": "Vehicle",
    **{name: "Animal" for name in ANIMAL_CLASSES},
}

# Refinement keywords, checked in order - first match wins
REFINEMENT_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Emergency-Vehicle", ("ambulance", "police", "fire truck", "fire engine")),
    ("Van", ("minivan", "van", "moving van")),
    ("Golf-Cart", ("golf cart", "golfcart")),
    ("Scooter", ("scooter", "moped", "vespa")),
)


def map_coco_to_schema(raw_label: str) -> str | None:
    """
    Map a detector label to the taxonomy.

    Unrecognized labels (traffic light, potted plant, ...) map to None and
    the detection is dropped. "Unknown" is never produced here.

    Args:
        raw_label: Detector class name, any case

    Returns:
        Taxonomy label, or None to drop the detection
    """
    return COCO_TO_SCHEMA.get(raw_label.strip().lower())


def refine_schema_label(current_label: str, secondary_text: str | None) -> str:
    """
    Narrow a taxonomy label using secondary classifier text.

    Args:
        current_label: Current taxonomy label
        secondary_text: Classifier output, e.g. "ambulance" or "minivan"

    Returns:
        Refined label, or current_label when nothing matches
    """
    if not secondary_text:
        return current_label

    text = secondary_text.lower()
    for refined_label, keywords in REFINEMENT_RULES:
        if any(keyword in text for keyword in keywords):
            return refined_label

    return current_label


def is_taxonomy_label(label: str) -> bool:
    return label in TAXONOMY
