# analysis/windowing.py
import numpy as np


class FrameLengthError(ValueError):
    """Frame length differs from the length a buffer was sized for."""


# ---------------------------------------------------------
# Tapers (x runs over 0..1 across the frame)
# ---------------------------------------------------------
def _hann(x):
    return 0.5 - 0.5 * np.cos(2 * np.pi * x)


def _hamming(x):
    return 25 / 46 - 21 / 46 * np.cos(2 * np.pi * x)


def _blackman(x):
    return 0.42 - 0.50 * np.cos(2 * np.pi * x) + 0.08 * np.cos(4 * np.pi * x)


def _lanczos(x):
    # np.sinc is the normalized sinc, sinc(0) == 1
    return np.sinc(2 * x - 1)


TAPERS = {
    "raw": None,
    "hann": _hann,
    "hamming": _hamming,
    "blackman": _blackman,
    "lanczos": _lanczos,
}


def get_taper(kind):
    try:
        return TAPERS[kind]
    except KeyError:
        raise ValueError(
            f"Unknown taper {kind!r}, expected one of {sorted(TAPERS)}"
        ) from None


def make_window(kind, n):
    """
    Precompute taper coefficients for an n-sample frame.

    Returns None for the "raw" taper so callers can copy instead of
    multiplying by ones.
    """
    func = get_taper(kind)
    if func is None:
        return None
    x = np.linspace(0.0, 1.0, int(n)) if n > 1 else np.zeros(int(n))
    return func(x)


def apply_window(frame, out, taper=None):
    """
    Write frame * taper(i / (n - 1)) into out.

    `taper` may be a taper kind, a taper function, a precomputed
    coefficient array or None (identity copy).
    """
    frame = np.asarray(frame, dtype=float)
    if frame.shape[0] != out.shape[0]:
        raise FrameLengthError(
            f"Wrong in/out lengths: {frame.shape[0]} != {out.shape[0]}"
        )

    if isinstance(taper, str):
        taper = get_taper(taper)

    if taper is None:
        out[:] = frame
    elif callable(taper):
        n = frame.shape[0]
        x = np.linspace(0.0, 1.0, n) if n > 1 else np.zeros(n)
        np.multiply(frame, taper(x), out=out)
    else:
        np.multiply(frame, taper, out=out)
    return out


def get_volume(frame):
    """RMS level of a frame."""
    frame = np.asarray(frame, dtype=float)
    if frame.size == 0:
        return 0.0
    return float(np.sqrt(np.dot(frame, frame) / frame.size))
