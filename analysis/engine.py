from __future__ import annotations

import logging

import numpy as np

from analysis.clock import MonotonicClock
from analysis.config import DetectorConfig
from analysis.consensus import get_consensus
from analysis.pitch import make_estimators
from analysis.tracker import NoteTracker, noop_trace
from analysis.windowing import (
    FrameLengthError,
    apply_window,
    get_volume,
    make_window,
)

logger = logging.getLogger(__name__)


def logger_trace(log: logging.Logger, level: int = logging.DEBUG):
    """Trace sink writing each line to `log` at `level`."""

    def _trace(msg: str) -> None:
        log.log(level, "%s", msg)

    return _trace


class NoteDetector:
    """
    Monophonic note detector for fixed-size frames.

    Every frame is windowed and handed to three estimators (ACX, YIN, MPM);
    their consensus drives a NoteTracker that reports a note only once it
    has persisted. One detector serves one stream: `update` is not
    reentrant because the window and lag buffers are reused across calls.
    """

    def __init__(
        self,
        frame_length: int,
        sample_rate: float,
        taper: str = "raw",
        config: DetectorConfig | None = None,
        clock=None,
        trace=None,
    ):
        if frame_length <= 0:
            raise ValueError("frame_length must be positive")

        self.frame_length = int(frame_length)
        self.sample_rate = float(sample_rate)
        self.taper = taper
        self.config = config or DetectorConfig()
        self.clock = clock or MonotonicClock()
        self.trace = trace or noop_trace

        self.window = make_window(taper, self.frame_length)
        self.buf = np.zeros(self.frame_length, dtype=float)
        self.est = np.zeros(3, dtype=float)

        self.detectors = make_estimators(
            self.frame_length, self.sample_rate, self.config
        )
        self.tracker = NoteTracker(
            estimators=self.detectors,
            config=self.config.tracker,
            clock=self.clock,
            trace=self.trace,
        )

        self._latest = None

        logger.debug(
            "NoteDetector ready: %d samples @ %.0f Hz, taper=%s",
            self.frame_length,
            self.sample_rate,
            taper,
        )

    # called by Tuner / MicAnalyzer
    def update(self, frame) -> None:
        frame = np.asarray(frame, dtype=float)
        if frame.ndim != 1 or frame.shape[0] != self.frame_length:
            raise FrameLengthError(
                f"Expected {self.frame_length} samples, got {frame.size}"
            )

        apply_window(frame, self.buf, self.window)

        est = self.est
        for i, detector in enumerate(self.detectors):
            est[i] = detector.process(self.buf)

        estimates = [float(e) for e in est]
        result = get_consensus(
            estimates, self.config.tracker.close_threshold, self.trace
        )
        volume = get_volume(frame)

        self.tracker.update(result, estimates, volume)

        self._latest = {
            "estimates": tuple(estimates),
            "consensus": result.consensus,
            "lone": result.lone,
            "volume": volume,
            "phase": self.tracker.phase,
        }

    def get_stable_note(self):
        return self.tracker.get_stable_note()

    def get_latest(self):
        return self._latest

    @property
    def phase(self) -> str:
        return self.tracker.phase

    def reset(self) -> None:
        self.tracker.reset()
        self._latest = None
