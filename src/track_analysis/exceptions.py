"""
Error taxonomy for the tracking and analysis pipeline.
"""


class TrackAnalysisError(Exception):
    """Base class for all pipeline errors."""


class InputError(TrackAnalysisError, ValueError):
    """Malformed detection (bbox or score) or invalid user input."""


class FormatError(TrackAnalysisError, ValueError):
    """Session text is not a sequence of frame-shaped records."""


class AdapterError(TrackAnalysisError, RuntimeError):
    """External detector, classifier or frame source call failed."""
