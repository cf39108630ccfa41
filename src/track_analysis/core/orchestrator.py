"""
Analysis Orchestrator - Stepped, pausable offline analysis of a time range.

Drives frame source -> detector -> schema mapping -> tracker -> refinement
over sample times and collects one FrameRecord per step.

States:
    IDLE -> ANALYZING <-> PAUSED -> DONE
    ANALYZING / PAUSED -> IDLE on cancel, reset or adapter failure

run() is a cooperative loop in the calling thread. pause(), resume() and
cancel() may be called from any thread (or from inside an adapter call);
the loop checks the mode at the top of every iteration and never stops
in the middle of a frame.
"""

import logging
import threading
import time
from collections.abc import Callable, Iterator
from dataclasses import replace
from typing import Any

from ..exceptions import AdapterError, InputError
from ..models import (
    AnalysisMode,
    AnalysisRange,
    AnalysisSession,
    Detector,
    FrameRecord,
    FrameSource,
    SecondaryClassifier,
    Track,
    TrackSummary,
)
from ..session.summary import accumulate_summary, summarize_frames
from ..utils.constants import (
    DEFAULT_ANALYSIS_STEP,
    DEFAULT_MIN_CONFIDENCE,
    DEFAULT_PAUSE_POLL_INTERVAL,
    PROGRESS_LOG_INTERVAL,
    REFINEMENT_LABELS,
    REFINEMENT_MIN_SCORE,
)
from .detections import filter_detections
from .schema import is_taxonomy_label, refine_schema_label
from .tracker import Tracker

logger = logging.getLogger(__name__)

TIMESTAMP_DECIMALS = 6  # Sample times are rounded to avoid float drift
_END_EPSILON = 1e-9


def sample_times(analysis_range: AnalysisRange, step: float) -> Iterator[float]:
    """Sample times from range.start (inclusive) to range.end (exclusive)."""
    if analysis_range.end is None:
        raise InputError("Analysis range end must be resolved before sampling")

    index = 0
    while True:
        t = round(analysis_range.start + index * step, TIMESTAMP_DECIMALS)
        if t >= analysis_range.end - _END_EPSILON:
            return
        yield t
        index += 1


class AnalysisOrchestrator:
    """
    Runs the tracking pipeline over a time range and owns the session.

    Attributes:
        tracker: Tracker instance (shared with the live driver, never global)
        session: Current AnalysisSession
        last_error: Adapter error that ended the last run, if any
    """

    def __init__(
        self,
        frame_source: FrameSource,
        detector: Detector,
        classifier: SecondaryClassifier | None = None,
        tracker: Tracker | None = None,
        min_confidence: float = DEFAULT_MIN_CONFIDENCE,
        refinement_labels: tuple[str, ...] = REFINEMENT_LABELS,
        refinement_min_score: float = REFINEMENT_MIN_SCORE,
        pause_poll_interval: float = DEFAULT_PAUSE_POLL_INTERVAL,
        sleep: Callable[[float], Any] = time.sleep,
        on_frame: Callable[[FrameRecord], None] | None = None,
    ):
        """
        Args:
            frame_source: Seekable source of frames
            detector: Object detector adapter
            classifier: Secondary classifier for refinement (None disables it)
            tracker: Tracker to drive (a new one if not given)
            min_confidence: Detections below this score are dropped
            refinement_labels: Labels eligible for refinement
            refinement_min_score: Track score must exceed this for refinement
            pause_poll_interval: Seconds between pause flag checks
            sleep: Sleep function used while paused
            on_frame: Called with every appended FrameRecord
        """
        self.frame_source = frame_source
        self.detector = detector
        self.classifier = classifier
        self.tracker = tracker or Tracker()
        self.min_confidence = min_confidence
        self.refinement_labels = frozenset(refinement_labels)
        self.refinement_min_score = refinement_min_score
        self.pause_poll_interval = pause_poll_interval
        self._sleep = sleep
        self._on_frame = on_frame

        self.session = AnalysisSession()
        self.last_error: AdapterError | None = None
        self._summaries: dict[int, TrackSummary] = {}
        self._lock = threading.RLock()
        self._run_id = 0

    # --- State ---

    @property
    def mode(self) -> AnalysisMode:
        return self.session.mode

    @property
    def is_busy(self) -> bool:
        """True while a run is in flight (analyzing or paused)."""
        return self.mode in (AnalysisMode.ANALYZING, AnalysisMode.PAUSED)

    def track_summaries(self) -> list[TrackSummary]:
        """Session-wide summary per track id, in order of first appearance."""
        return list(self._summaries.values())

    # --- Lifecycle ---

    def start(
        self,
        analysis_range: AnalysisRange | None = None,
        step: float = DEFAULT_ANALYSIS_STEP,
    ) -> AnalysisSession:
        """
        Prepare a new run: reset the tracker and start an empty session.

        A run already in flight is abandoned and its frames discarded.

        Args:
            analysis_range: Range to analyze; open end means full duration
            step: Seconds between samples

        Returns:
            The new session (mode ANALYZING)

        Raises:
            InputError: If step or range is invalid
        """
        analysis_range = analysis_range or AnalysisRange()
        if step <= 0:
            raise InputError(f"Step must be positive, got {step}")

        with self._lock:
            if self.is_busy:
                logger.warning("Analysis already running - abandoning it")
                self._discard(AnalysisMode.IDLE)

            resolved = analysis_range.resolve(self.frame_source.duration)
            if resolved.start < 0 or resolved.end <= resolved.start:
                raise InputError(
                    f"Invalid analysis range {resolved.start}s - {resolved.end}s"
                )

            self.tracker.reset()
            self._run_id += 1
            self._summaries = {}
            self.last_error = None
            self.session = AnalysisSession(
                range=resolved,
                step=step,
                frames=[],
                progress_percent=0,
                mode=AnalysisMode.ANALYZING,
            )

        logger.info(
            f"Analysis started: {resolved.start:.2f}s - {resolved.end:.2f}s, step {step}s"
        )
        return self.session

    def run(self) -> AnalysisSession:
        """
        Run the started analysis to completion, cancellation or failure.

        Returns:
            The session (mode DONE), or the discarded idle session if cancelled

        Raises:
            AdapterError: If a frame source, detector or classifier call fails
        """
        with self._lock:
            if not self.is_busy:
                logger.warning(f"Nothing to run (mode={self.mode.value})")
                return self.session
            run_id = self._run_id
            session = self.session

        frame_count = 0
        try:
            for t in sample_times(session.range, session.step):
                if not self._wait_while_paused(run_id):
                    return self._abandoned()

                record = self._analyze_frame(t, run_id)
                if record is None or not self._append(run_id, record):
                    return self._abandoned()

                frame_count += 1
                if frame_count % PROGRESS_LOG_INTERVAL == 0:
                    logger.info(
                        f"[{t:.1f}s] Frame {frame_count} | {session.progress_percent}% | "
                        f"Tracks: {len(self._summaries)}"
                    )

        except AdapterError as e:
            self._fail(run_id, e)
            raise

        return self._finish(run_id, frame_count)

    def analyze(
        self,
        analysis_range: AnalysisRange | None = None,
        step: float = DEFAULT_ANALYSIS_STEP,
    ) -> AnalysisSession:
        """start() followed by run()."""
        self.start(analysis_range, step)
        return self.run()

    def start_in_thread(
        self,
        analysis_range: AnalysisRange | None = None,
        step: float = DEFAULT_ANALYSIS_STEP,
    ) -> threading.Thread:
        """
        start() here, run() in a daemon thread.

        Failures end up in last_error (and the log) instead of being raised.
        """
        self.start(analysis_range, step)
        thread = threading.Thread(
            target=self._run_quietly, name="analysis-orchestrator", daemon=True
        )
        thread.start()
        return thread

    def _run_quietly(self) -> None:
        try:
            self.run()
        except AdapterError:
            pass  # already logged and stored in last_error by _fail

    def pause(self) -> None:
        """Pause a running analysis. No-op unless ANALYZING."""
        with self._lock:
            if self.mode == AnalysisMode.ANALYZING:
                self.session.mode = AnalysisMode.PAUSED
                logger.info("Analysis paused")

    def resume(self) -> None:
        """Resume a paused analysis. No-op unless PAUSED."""
        with self._lock:
            if self.mode == AnalysisMode.PAUSED:
                self.session.mode = AnalysisMode.ANALYZING
                logger.info("Analysis resumed")

    def toggle_pause(self) -> None:
        with self._lock:
            if self.mode == AnalysisMode.PAUSED:
                self.resume()
            else:
                self.pause()

    def cancel(self) -> None:
        """Abandon the in-flight run. Partial results are discarded."""
        with self._lock:
            if self.is_busy:
                self._discard(AnalysisMode.IDLE)
                logger.info("Analysis cancelled - partial results discarded")

    def reset(self) -> None:
        """Return to IDLE from any state and clear the tracker (new media source)."""
        with self._lock:
            self._discard(AnalysisMode.IDLE)
            self.tracker.reset()
        logger.info("Orchestrator reset")

    def load(self, session: AnalysisSession) -> None:
        """
        Replace the session wholesale (e.g. from a session file).

        Summaries are rebuilt from the loaded frames.
        """
        with self._lock:
            if self.is_busy:
                logger.warning("Loading a session - abandoning running analysis")
                self._discard(AnalysisMode.IDLE)
            self._run_id += 1
            self.session = session
            self._summaries = {s.id: s for s in summarize_frames(session.frames)}
        logger.info(
            f"Session loaded: {session.frame_count} frames, {len(self._summaries)} tracks"
        )

    def relabel_track(self, track_id: int, label: str) -> int:
        """
        Correct the label of one track across the finished session.

        Every frame holding the track is replaced by a new record with the
        new label (marked refined).

        Args:
            track_id: Track to relabel
            label: New taxonomy label

        Returns:
            Number of frames changed (0 if not DONE or the id is unknown)

        Raises:
            InputError: If label is not in the taxonomy
        """
        if not is_taxonomy_label(label):
            raise InputError(f"Unknown label: {label}")

        with self._lock:
            if self.mode != AnalysisMode.DONE:
                logger.warning(f"Cannot relabel while {self.mode.value}")
                return 0

            changed = 0
            frames = []
            for record in self.session.frames:
                if track_id in record.track_ids():
                    tracks = tuple(
                        replace(t, label=label, refined=True) if t.id == track_id else t
                        for t in record.tracks
                    )
                    record = FrameRecord(timestamp=record.timestamp, tracks=tracks)
                    changed += 1
                frames.append(record)

            self.session.frames = frames
            self._summaries = {s.id: s for s in summarize_frames(frames)}

        if changed:
            logger.info(f"Track {track_id} relabelled to {label} in {changed} frames")
        return changed

    # --- Loop internals ---

    def _is_current(self, run_id: int) -> bool:
        with self._lock:
            return run_id == self._run_id and self.is_busy

    def _wait_while_paused(self, run_id: int) -> bool:
        """Block while PAUSED. False if the run was cancelled or replaced."""
        while True:
            with self._lock:
                if not (run_id == self._run_id and self.is_busy):
                    return False
                if self.mode != AnalysisMode.PAUSED:
                    return True
            self._sleep(self.pause_poll_interval)

    def _analyze_frame(self, t: float, run_id: int) -> FrameRecord | None:
        """Seek, detect, track and refine one sample. None if abandoned meanwhile."""
        frame = self._call_adapter("Frame source", self.frame_source.seek, t)
        raw_detections = self._call_adapter("Detector", self.detector.detect, frame)
        detections = filter_detections(raw_detections, self.min_confidence)

        with self._lock:
            if not self._is_current(run_id):
                return None
            tracks = self.tracker.update(detections, t)

        if not self._refine_tracks(frame, tracks, run_id):
            return None

        with self._lock:
            if not self._is_current(run_id):
                return None
            return FrameRecord(
                timestamp=t, tracks=tuple(track.snapshot() for track in self.tracker.tracks)
            )

    def _refine_tracks(self, frame: Any, tracks: tuple[Track, ...], run_id: int) -> bool:
        """
        Run secondary classification once per eligible track.

        Classifier calls run without the lock; each result is applied only
        while run_id is still the current run.

        Returns:
            False if the run was cancelled or replaced during classification
        """
        if self.classifier is None:
            return True

        for track in tracks:
            if track.refined or track.label not in self.refinement_labels:
                continue
            if track.score <= self.refinement_min_score:
                continue

            detail = self._call_adapter(
                "Classifier", self.classifier.classify, frame, track.bbox
            )
            if detail is None:
                continue

            previous_label = track.label
            refined_label = refine_schema_label(previous_label, detail)
            with self._lock:
                if not self._is_current(run_id):
                    logger.debug(f"Dropping refinement of track {track.id} from stale run")
                    return False
                self.tracker.apply_refinement(track.id, refined_label)

            if refined_label != previous_label:
                logger.info(
                    f"Track {track.id} refined: {previous_label} -> {refined_label} ({detail})"
                )
        return True

    def _call_adapter(self, name: str, func: Callable, *args):
        try:
            return func(*args)
        except AdapterError:
            raise
        except Exception as e:
            raise AdapterError(f"{name} call failed: {e}") from e

    def _append(self, run_id: int, record: FrameRecord) -> bool:
        with self._lock:
            if not (run_id == self._run_id and self.is_busy):
                return False
            session = self.session
            session.frames.append(record)
            self._summaries = accumulate_summary(self._summaries, record)
            # halves round up
            session.progress_percent = int(
                100 * (record.timestamp - session.range.start) / session.range.length + 0.5
            )

        if self._on_frame is not None:
            self._on_frame(record)
        return True

    def _finish(self, run_id: int, frame_count: int) -> AnalysisSession:
        with self._lock:
            if not (run_id == self._run_id and self.is_busy):
                return self._abandoned()
            self.session.mode = AnalysisMode.DONE
            self.session.progress_percent = 100
            session = self.session

        try:
            self.frame_source.seek(session.range.start)
        except Exception as e:
            logger.warning(f"Could not rewind frame source to {session.range.start}s: {e}")

        logger.info(
            f"Analysis complete: {frame_count} frames, {len(self._summaries)} tracks"
        )
        return session

    def _fail(self, run_id: int, error: AdapterError) -> None:
        logger.error(f"Analysis failed: {error}", exc_info=True)
        with self._lock:
            if run_id == self._run_id:
                self._discard(AnalysisMode.IDLE)
                self.last_error = error

    def _abandoned(self) -> AnalysisSession:
        logger.debug("Run abandoned")
        return self.session

    def _discard(self, mode: AnalysisMode) -> None:
        """Drop the current session's results. Caller holds the lock."""
        self._run_id += 1
        self._summaries = {}
        self.session = AnalysisSession(
            range=self.session.range, step=self.session.step, mode=mode
        )
