# analysis/clock.py
from time import monotonic


class MonotonicClock:
    """Milliseconds from the process monotonic clock."""

    def __call__(self):
        return monotonic() * 1000.0


class ManualClock:
    """
    Clock that only moves when told to.

    Used for deterministic replay of recorded audio (advance by one frame
    duration per frame) and in tests.
    """

    def __init__(self, start_ms=0.0):
        self.now = float(start_ms)

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += float(ms)
        return self.now
