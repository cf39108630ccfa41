"""
Track Analysis CLI
Main entry point for offline video analysis.

Commands:
  VIDEO               Analyze a video and save the session
  --summary SESSION   Print the track summary of a saved session
  --signal IMAGE      Classify a traffic signal crop
  --validate          Check configuration validity
"""

import argparse
import logging
import signal
import sys
from datetime import datetime
from pathlib import Path

import cv2

from .adapters import HttpClassifier, VideoFrameSource, YoloClassifier, YoloDetector
from .config import (
    Config,
    ConfigValidationError,
    load_config,
    print_validation_result,
    read_config_file,
    validate_config,
)
from .core import AnalysisOrchestrator, RandomHueColors, Tracker, classify_signal
from .exceptions import TrackAnalysisError
from .models import AnalysisMode, AnalysisRange, SecondaryClassifier, TrackSummary
from .session import load_session, save_session, summarize_frames

logger = logging.getLogger(__name__)


def setup_logging(quiet: bool = False) -> None:
    """
    Setup logging configuration.

    Args:
        quiet: If True, only show warnings and errors
    """
    level = logging.WARNING if quiet else logging.INFO

    # Custom formatter with shorter module names
    class ShortNameFormatter(logging.Formatter):
        def format(self, record):
            record.name = record.name.replace("track_analysis.", "ta.")
            return super().format(record)

    handler = logging.StreamHandler()
    handler.setFormatter(
        ShortNameFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s", datefmt="%H:%M:%S"
        )
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(level)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Track Analysis - Persistent object tracks from video",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m track_analysis clip.mp4                   # Analyze the whole video
  python -m track_analysis clip.mp4 --start 5 --end 20 --step 0.2
  python -m track_analysis --summary sessions/clip.yaml
  python -m track_analysis --signal frame.png --bbox 410 80 30 90
  python -m track_analysis --validate

While analyzing:
  Ctrl+C   cancel (partial results are discarded)
  SIGUSR1  toggle pause/resume (kill -USR1 <pid>)

Environment Variables:
  TRACK_ANALYSIS_MODEL         Override detection.model_file
  TRACK_ANALYSIS_ANALYZER_URL  Use the HTTP classifier at this URL
        """,
    )

    parser.add_argument("video", nargs="?", help="Video file to analyze")
    parser.add_argument("--start", type=float, default=0.0, help="Start time in seconds")
    parser.add_argument(
        "--end", type=float, default=None, help="End time in seconds (default: video end)"
    )
    parser.add_argument(
        "--step", type=float, default=None, help="Seconds between samples (default: config)"
    )
    parser.add_argument("-o", "--output", help="Session file to write")
    parser.add_argument(
        "-c", "--config", default=None, help="Path to config file (default: search)"
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Only show warnings and errors"
    )

    parser.add_argument(
        "--validate", action="store_true", help="Validate configuration and exit"
    )
    parser.add_argument("--summary", metavar="SESSION", help="Summarize a session file")
    parser.add_argument("--signal", metavar="IMAGE", help="Classify a traffic signal")
    parser.add_argument(
        "--bbox",
        type=float,
        nargs=4,
        metavar=("X", "Y", "W", "H"),
        help="Signal bounding box for --signal",
    )

    args = parser.parse_args(argv)
    if args.signal and not args.bbox:
        parser.error("--signal requires --bbox X Y W H")
    if not (args.video or args.validate or args.summary or args.signal):
        parser.error("a video file is required")
    return args


def build_classifier(config: Config) -> SecondaryClassifier | None:
    """Secondary classifier from config, or None when refinement is disabled."""
    refinement = config.refinement
    if not refinement.enabled:
        return None
    if refinement.backend == "http":
        return HttpClassifier(
            refinement.analyzer_url,
            timeout=refinement.timeout_seconds,
            min_crop_size=refinement.min_crop_size,
        )
    return YoloClassifier.from_model_file(
        refinement.model_file,
        device=config.detection.device,
        min_crop_size=refinement.min_crop_size,
    )


def build_orchestrator(config: Config, frame_source) -> AnalysisOrchestrator:
    """Wire tracker, detector and classifier for one frame source."""
    tracker = Tracker(
        iou_threshold=config.tracking.iou_threshold,
        max_missed_frames=config.tracking.max_missed_frames,
        color_assigner=RandomHueColors(config.tracking.color_seed),
    )
    return AnalysisOrchestrator(
        frame_source=frame_source,
        detector=YoloDetector.from_model_file(
            config.detection.model_file, config.detection.device
        ),
        classifier=build_classifier(config),
        tracker=tracker,
        min_confidence=config.detection.min_confidence,
        refinement_labels=tuple(config.refinement.labels),
        refinement_min_score=config.refinement.min_score,
        pause_poll_interval=config.analysis.pause_poll_seconds,
    )


def _setup_signal_handlers(orchestrator: AnalysisOrchestrator) -> None:
    """Ctrl+C cancels the analysis; SIGUSR1 toggles pause."""

    def handle_interrupt(_signum, _frame):
        # Note: print is safer than logger in signal handlers
        print("\nInterrupted, cancelling analysis...")
        orchestrator.cancel()

    def handle_pause(_signum, _frame):
        orchestrator.toggle_pause()

    signal.signal(signal.SIGINT, handle_interrupt)
    if hasattr(signal, "SIGUSR1"):
        signal.signal(signal.SIGUSR1, handle_pause)


def default_session_path(config: Config, video: str) -> Path:
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return Path(config.output.session_dir) / f"{Path(video).stem}_{timestamp}.yaml"


def print_summary_table(summaries: list[TrackSummary]) -> None:
    """Print one line per track."""
    print("\n" + "=" * 60)
    print(f"TRACKS ({len(summaries)})")
    print("=" * 60)
    for s in summaries:
        print(
            f"  #{s.id:<4d} {s.label:<18s} first seen {s.first_seen_at:7.2f}s  "
            f"max score {s.max_score:.2f}"
        )
    print("=" * 60 + "\n")


def run_analysis(args: argparse.Namespace, config: Config) -> int:
    """Analyze args.video and save the session. Returns exit code."""
    step = args.step or config.analysis.step_seconds

    with VideoFrameSource(args.video) as source:
        orchestrator = build_orchestrator(config, source)
        _setup_signal_handlers(orchestrator)

        session = orchestrator.analyze(AnalysisRange(args.start, args.end), step)
        if session.mode != AnalysisMode.DONE:
            logger.warning("Analysis cancelled - nothing saved")
            return 130

        output = Path(args.output) if args.output else default_session_path(config, args.video)
        save_session(session, output)
        print_summary_table(orchestrator.track_summaries())
    return 0


def run_summary(path: str) -> int:
    try:
        session = load_session(path)
    except OSError as e:
        logger.error(f"Cannot read session file: {path} ({e})")
        return 1
    print(f"\nSession: {path}")
    print(f"Range: {session.range.start:.2f}s - {session.range.end:.2f}s")
    print(f"Frames: {session.frame_count}")
    print_summary_table(summarize_frames(session.frames))
    return 0


def run_signal(image_path: str, bbox: list[float]) -> int:
    frame = cv2.imread(image_path)
    if frame is None:
        logger.error(f"Cannot read image: {image_path}")
        return 1
    reading = classify_signal(frame, tuple(bbox))
    print(f"Signal: {reading.color} (confidence {reading.confidence:.2f})")
    return 0


def run_validate(config_path: str | None) -> int:
    try:
        result = validate_config(read_config_file(config_path))
    except ConfigValidationError as e:
        logger.error(str(e))
        return 1
    print_validation_result(result)
    return 0 if result.valid else 1


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.quiet)

    try:
        if args.validate:
            sys.exit(run_validate(args.config))
        if args.summary:
            sys.exit(run_summary(args.summary))
        if args.signal:
            sys.exit(run_signal(args.signal, args.bbox))

        config = load_config(args.config)
        sys.exit(run_analysis(args, config))

    except ConfigValidationError as e:
        logger.error(str(e))
        for error in e.errors:
            logger.error(f"  {error}")
        sys.exit(1)
    except TrackAnalysisError as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
