# analysis/pitch.py
from dataclasses import replace

import numpy as np

from analysis.config import AcxConfig, MpmConfig, YinConfig
from analysis.peaks import find_dominant_peak, quadratic_peak
from analysis.windowing import FrameLengthError


NO_PITCH = -1.0


class PitchEstimator:
    """
    Base for the per-frame frequency estimators.

    Each estimator owns a scratch buffer sized once for `frame_length` and
    reused on every call, so a detector never allocates per frame for its
    lag tables.
    """

    name = "base"

    def __init__(self, frame_length, sample_rate, scratch_length, conf):
        if frame_length <= 0:
            raise ValueError("frame_length must be positive")
        if sample_rate <= 0:
            raise ValueError("sample_rate must be positive")

        self.frame_length = int(frame_length)
        self.sample_rate = float(sample_rate)
        # private copy: sensitivity changes must not leak into shared config
        self.conf = replace(conf)
        self.tmp = np.zeros(int(scratch_length), dtype=float)

    def _check(self, buf):
        buf = np.asarray(buf, dtype=float)
        if buf.ndim != 1 or buf.shape[0] != self.frame_length:
            raise FrameLengthError(
                f"{self.name}: expected {self.frame_length} samples, "
                f"got {buf.shape[0] if buf.ndim else 0}"
            )
        return buf

    def process(self, buf):
        raise NotImplementedError

    def adjust_sensitivity(self, factor):
        """factor > 1 makes the estimator more willing to report a pitch."""
        raise NotImplementedError


# ---------------------------------------------------------
# Autocorrelation with a volume gate
# ---------------------------------------------------------
class AcxEstimator(PitchEstimator):
    name = "acx"

    def __init__(self, frame_length, sample_rate, conf=None):
        super().__init__(
            frame_length, sample_rate, frame_length, conf or AcxConfig()
        )

    def process(self, buf):
        buf = self._check(buf)
        n = buf.shape[0]
        acfv = self.tmp
        acfv.fill(0)

        for tau in range((n + 1) // 2):
            acfv[tau] = np.dot(buf[:n - tau], buf[tau:]) / (n - tau)

            if tau == 0 and np.sqrt(acfv[0]) < self.conf.volume_min:
                return NO_PITCH

        peak = find_dominant_peak(
            acfv, self.conf.peak_ignore, self.conf.peak_cutoff
        )
        return self.sample_rate / peak if peak > 0 else NO_PITCH

    def adjust_sensitivity(self, factor):
        self.conf.volume_min /= factor


# ---------------------------------------------------------
# YIN (cumulative mean normalized difference)
# ---------------------------------------------------------
class YinEstimator(PitchEstimator):
    """
    YIN after aubio's pitchyin.c.

    Stops at the first dip under the threshold instead of searching the
    whole lag range, trading a little accuracy for bounded latency.
    """

    name = "yin"

    def __init__(self, frame_length, sample_rate, conf=None):
        super().__init__(
            frame_length, sample_rate, frame_length // 2, conf or YinConfig()
        )
        self._diff = np.zeros(frame_length // 2, dtype=float)

    def process(self, buf):
        buf = self._check(buf)
        yin = self.tmp
        half = yin.shape[0]
        threshold = self.conf.threshold
        if half == 0:
            return NO_PITCH

        head = buf[:half]
        diff = self._diff
        total = 0.0
        peak_pos = -1
        min_pos = 0

        yin[0] = 1.0

        for tau in range(1, half):
            np.subtract(head, buf[tau:tau + half], out=diff)
            d = float(np.dot(diff, diff))
            total += d
            yin[tau] = d * tau / total if total else 1.0

            if yin[tau] < yin[min_pos]:
                min_pos = tau

            period = tau - 3
            if (
                tau > 4
                and yin[period] < threshold
                and yin[period] < yin[period + 1]
            ):
                peak_pos = period
                break

        if peak_pos == -1:
            peak_pos = min_pos
            if yin[peak_pos] >= threshold:
                return NO_PITCH

        t0 = quadratic_peak(yin, peak_pos).position
        return self.sample_rate / t0 if t0 else NO_PITCH

    def adjust_sensitivity(self, factor):
        self.conf.threshold *= factor


# ---------------------------------------------------------
# McLeod Pitch Method (normalized square difference)
# ---------------------------------------------------------
class MpmEstimator(PitchEstimator):
    name = "mpm"

    def __init__(self, frame_length, sample_rate, conf=None):
        super().__init__(
            frame_length, sample_rate, frame_length, conf or MpmConfig()
        )

    def process(self, buf):
        buf = self._check(buf)
        n = buf.shape[0]
        nsdf = self.tmp
        nsdf.fill(0)

        for tau in range((n + 1) // 2):
            a = buf[:n - tau]
            b = buf[tau:]
            div = np.dot(a, a) + np.dot(b, b)
            nsdf[tau] = 2 * np.dot(a, b) / div if div else 0.0

        peak = find_dominant_peak(
            nsdf, self.conf.peak_ignore, self.conf.peak_cutoff
        )
        hz = self.sample_rate / peak if peak > 0 else NO_PITCH

        # very low estimates are spurious locks on the frame envelope
        return NO_PITCH if hz < self.conf.pitch_min else hz

    def adjust_sensitivity(self, factor):
        self.conf.peak_ignore /= factor


def make_estimators(frame_length, sample_rate, config=None):
    """The three estimators in consensus order: ACX, YIN, MPM."""
    acx = config.acx if config is not None else None
    yin = config.yin if config is not None else None
    mpm = config.mpm if config is not None else None
    return [
        AcxEstimator(frame_length, sample_rate, acx),
        YinEstimator(frame_length, sample_rate, yin),
        MpmEstimator(frame_length, sample_rate, mpm),
    ]
