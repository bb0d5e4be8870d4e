import numpy as np


def synthetic_tone(freq, sr=44100, n=None, dur=0.05, amp=0.5, phase=0.0,
                   harmonics=None):
    """
    Generate a deterministic periodic test signal.

    Parameters
    ----------
    freq : float
        Fundamental frequency in Hz.
    sr : int
        Sample rate.
    n : int, optional
        Number of samples; overrides `dur`.
    dur : float
        Duration in seconds.
    amp : float
        Peak amplitude of the summed signal before harmonics are mixed in.
    phase : float
        Starting phase in radians.
    harmonics : dict, optional
        {multiple: relative amplitude} partials added on top of the
        fundamental; the sum is rescaled so `amp` stays the overall level.

    Returns
    -------
    np.ndarray
        The synthetic audio signal.
    """
    n = int(sr * dur) if n is None else int(n)
    t = np.arange(n) / sr
    harmonics = harmonics or {}

    sig = np.sin(2 * np.pi * freq * t + phase)
    for mult, rel in harmonics.items():
        sig += rel * np.sin(2 * np.pi * freq * mult * t + phase)
    return amp * sig / (1.0 + sum(harmonics.values()))
