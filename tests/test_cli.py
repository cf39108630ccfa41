"""
Tests for command line parsing and the offline commands
"""

import contextlib
import io
import os
import tempfile
import unittest

import cv2
import numpy as np

from track_analysis.cli import parse_args, run_signal, run_summary
from track_analysis.models import AnalysisSession, FrameRecord, TrackSnapshot
from track_analysis.session import save_session


class TestParseArgs(unittest.TestCase):
    """Test argument validation."""

    def test_video_with_range(self):
        args = parse_args(["clip.mp4", "--start", "5", "--end", "20", "--step", "0.2"])

        self.assertEqual(args.video, "clip.mp4")
        self.assertEqual((args.start, args.end, args.step), (5.0, 20.0, 0.2))

    def test_defaults(self):
        args = parse_args(["clip.mp4"])

        self.assertEqual(args.start, 0.0)
        self.assertIsNone(args.end)
        self.assertIsNone(args.step)

    def test_video_required(self):
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                parse_args([])

    def test_signal_requires_bbox(self):
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                parse_args(["--signal", "frame.png"])

    def test_signal_with_bbox(self):
        args = parse_args(["--signal", "frame.png", "--bbox", "1", "2", "3", "4"])

        self.assertEqual(args.bbox, [1.0, 2.0, 3.0, 4.0])


class TestCommands(unittest.TestCase):
    """Test the commands that need no models."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)

    def test_summary_of_saved_session(self):
        track = TrackSnapshot(1, (0, 0, 10, 10), "Bus", 0.8, 0.8, 0.0, "#123456")
        session = AnalysisSession(frames=[FrameRecord(0.0, (track,)), FrameRecord(0.5, (track,))])
        path = save_session(session, os.path.join(self.tmpdir.name, "s.yaml"))

        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            code = run_summary(str(path))

        self.assertEqual(code, 0)
        self.assertIn("TRACKS (1)", out.getvalue())
        self.assertIn("Bus", out.getvalue())

    def test_summary_of_missing_file(self):
        missing = os.path.join(self.tmpdir.name, "missing.yaml")

        with self.assertLogs("track_analysis.cli", level="ERROR"):
            self.assertEqual(run_summary(missing), 1)

    def test_signal_on_image(self):
        image = np.zeros((30, 10, 3), dtype=np.uint8)
        image[20:30, :] = (0, 255, 0)
        path = os.path.join(self.tmpdir.name, "signal.png")
        cv2.imwrite(path, image)

        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            code = run_signal(path, [0, 0, 10, 30])

        self.assertEqual(code, 0)
        self.assertIn("green", out.getvalue())

    def test_signal_missing_image(self):
        self.assertEqual(run_signal(os.path.join(self.tmpdir.name, "none.png"), [0, 0, 1, 1]), 1)


if __name__ == "__main__":
    unittest.main()
