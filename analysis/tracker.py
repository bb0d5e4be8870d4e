# analysis/tracker.py
import logging
from dataclasses import dataclass
from typing import Optional

from analysis.clock import MonotonicClock
from analysis.config import TrackerConfig
from analysis.consensus import is_close

logger = logging.getLogger(__name__)

IDLE = "idle"
PRIMING = "priming"
LOCKED = "locked"

# applied to every estimator on lock, inverted on unlock
SENSITIVITY_BOOST = 2.0


@dataclass
class Candidate:
    freq: float
    lone: bool
    start: float


@dataclass
class Tracking:
    freq: float
    start: float
    missed: Optional[float] = None


@dataclass(frozen=True)
class StableNote:
    freq: float
    stable: bool


def noop_trace(_msg):
    pass


class NoteTracker:
    """
    Hysteresis over per-frame consensus results.

      idle -> priming -> locked

    A frequency has to persist (track_cons_ms with consensus, track_lone_ms
    from a single estimator) before it is locked. A locked frequency
    survives disagreeing frames for detrack_est_some_ms, empty frames for
    detrack_est_none_ms, and silence indefinitely.

    While locked the estimators are made more sensitive so a decaying note
    keeps being reported; unlocking restores them.
    """

    def __init__(self, estimators=(), config=None, clock=None, trace=None):
        self.conf = config or TrackerConfig()
        self.estimators = list(estimators)
        self.clock = clock or MonotonicClock()
        self.trace = trace or noop_trace

        # None (idle) | Candidate (priming) | Tracking (locked)
        self.state = None

    # -------------------------
    # State views
    # -------------------------
    @property
    def phase(self):
        if isinstance(self.state, Tracking):
            return LOCKED
        if isinstance(self.state, Candidate):
            return PRIMING
        return IDLE

    @property
    def candidate(self):
        return self.state if isinstance(self.state, Candidate) else None

    @property
    def tracking(self):
        return self.state if isinstance(self.state, Tracking) else None

    def is_close(self, a, b):
        return is_close(a, b, self.conf.close_threshold)

    # -------------------------
    # Update
    # -------------------------
    def update(self, result, estimates, volume):
        """
        Advance the state machine by one frame.

        `result` is the frame's ConsensusResult, `estimates` the raw
        per-estimator values and `volume` the RMS of the unwindowed frame.
        """
        now = self.clock()
        freq = result.freq
        lone = result.is_lone

        tracking = self.tracking
        if tracking is not None:
            if self._hold_lock(tracking, result, estimates, volume, now):
                return
            self._stop_tracking()

        self._prime(result, freq, lone, now)

    def _hold_lock(self, tracking, result, estimates, volume, now):
        """True while the locked frequency should be kept."""
        if self.is_close(tracking.freq, result.freq):
            return True

        if result.has_consensus:
            # estimators agree on something else: the note changed
            self.trace(f"** NOTE CHANGED to {result.consensus:.0f}")
            return False

        for est in estimates:
            if self.is_close(est, tracking.freq):
                tracking.missed = None
                return True

        if volume < self.conf.detrack_min_volume:
            self.trace(f"** TOO QUIET @ {volume:.5f}")
            return True

        if tracking.missed is None:
            tracking.missed = now
            return True

        ms = now - tracking.missed
        limit = (
            self.conf.detrack_est_some_ms
            if result.lone != 0
            else self.conf.detrack_est_none_ms
        )
        if ms < limit:
            return True

        self.trace(f"** GONE STALE in {ms:.0f} ms")
        return False

    def _prime(self, result, freq, lone, now):
        if not result.usable:
            self.state = None
            return

        candidate = self.candidate
        if candidate is None or not self.is_close(candidate.freq, freq):
            self.state = Candidate(freq=freq, lone=lone, start=now)
            return

        candidate.freq = (candidate.freq + freq) / 2
        candidate.lone = lone

        ms = now - candidate.start

        if ms > self.conf.track_cons_ms and not candidate.lone:
            self.trace("** TRACKING by consensus")
            self._start_tracking(candidate.freq, now)
        elif ms > self.conf.track_lone_ms and candidate.lone:
            self.trace("** TRACKING by lone estimate")
            self._start_tracking(candidate.freq, now)

    # -------------------------
    # Lock / unlock
    # -------------------------
    def _start_tracking(self, freq, now):
        # stability is timed from the lock, not from when priming began
        self.state = Tracking(freq=freq, start=now)
        self._adjust_sensitivity(SENSITIVITY_BOOST)
        logger.debug("Locked on %.2f Hz", freq)

    def _stop_tracking(self):
        freq = self.state.freq
        self.state = None
        self._adjust_sensitivity(1.0 / SENSITIVITY_BOOST)
        logger.debug("Lost lock on %.2f Hz", freq)

    def _adjust_sensitivity(self, factor):
        logger.debug("Scaling estimator sensitivity by %.2f", factor)
        for est in self.estimators:
            est.adjust_sensitivity(factor)

    # -------------------------
    # Query / reset
    # -------------------------
    def get_stable_note(self):
        tracking = self.tracking
        if tracking is None:
            return None

        ms = self.clock() - tracking.start
        return StableNote(
            freq=tracking.freq, stable=ms >= self.conf.stable_note_ms
        )

    def reset(self):
        """Drop any candidate or lock, restoring estimator sensitivity."""
        if self.tracking is not None:
            self._stop_tracking()
        self.state = None
