"""
Constants used throughout the track analysis system
"""

# Tracker
DEFAULT_IOU_THRESHOLD = 0.3  # Same-label pairs must overlap more than this
DEFAULT_MAX_MISSED_FRAMES = 5  # Tracks are pruned once missed frames exceed this

# Detection filtering
DEFAULT_MIN_CONFIDENCE = 0.5  # Detections below this are dropped before mapping

# Refinement (second-stage classification)
REFINEMENT_LABELS = ("Vehicle", "Truck", "Motorcycle", "Scooter")
REFINEMENT_MIN_SCORE = 0.6  # Track score must exceed this to be refined
MIN_CLASSIFY_CROP_SIZE = 20  # Crops smaller than this (px, either side) are not classified

# Offline analysis
DEFAULT_ANALYSIS_STEP = 0.1  # Seconds between sampled frames
DEFAULT_PAUSE_POLL_INTERVAL = 0.2  # Seconds between pause flag checks
PROGRESS_LOG_INTERVAL = 50  # Log progress every N analyzed frames
FRAME_LOOKUP_TOLERANCE = 0.2  # Seconds, for replaying a recorded frame at a seek time

# Session files
DEFAULT_SESSION_DIR = "sessions"
DEFAULT_COLOR_TAG = "#00FF00"  # Used when a loaded track has no color

# Environment variables
ENV_MODEL_FILE = "TRACK_ANALYSIS_MODEL"
ENV_ANALYZER_URL = "TRACK_ANALYSIS_ANALYZER_URL"
