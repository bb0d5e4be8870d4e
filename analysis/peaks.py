# analysis/peaks.py
from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Peak:
    position: float
    value: float


def quadratic_peak(series, index: int) -> Peak:
    """
    Refine a peak (or dip) at `index` by fitting a parabola through
    series[index - 1], series[index], series[index + 1].

    Edge positions, series shorter than 3 samples and flat neighbourhoods
    (zero curvature) return the sample itself.
    """
    n = len(series)
    if index <= 0 or index >= n - 1 or n < 3:
        return Peak(float(index), float(series[index]))

    a = float(series[index - 1])
    b = float(series[index])
    c = float(series[index + 1])
    d = a - 2 * b + c
    if d == 0:
        return Peak(float(index), b)

    return Peak(index - (c - a) / (2 * d), b - (c - a) * (c - a) / (8 * d))


def find_positive_peaks(series, threshold: float) -> List[int]:
    """
    Index of the maximum of every positive run in `series` whose maximum
    reaches `threshold`.

    The leading positive run is skipped, so for correlation-like series
    the lag-0 lobe never counts as a peak.
    """
    data = series.tolist() if hasattr(series, "tolist") else list(series)
    n = len(data)
    peaks = []
    pos = 0

    # skip the leading positive run, then the gap after it
    while pos < n and data[pos] > 0:
        pos += 1
    while pos < n and data[pos] <= 0:
        pos += 1

    while pos < n:
        pos_max = -1
        while pos < n and data[pos] > 0:
            if pos_max < 0 or data[pos] > data[pos_max]:
                pos_max = pos
            pos += 1

        if pos_max != -1 and data[pos_max] >= threshold:
            peaks.append(pos_max)

        while pos < n and data[pos] <= 0:
            pos += 1

    return peaks


def find_dominant_peak(series, ignore: float, cutoff: float) -> float:
    """
    McLeod peak picking ("A Smarter Way to Find Pitch").

    Refines every positive peak at or above `ignore` and returns the
    position of the first one whose height is at least `cutoff` times the
    highest. The first qualifying peak is the longest lag, which favours the
    fundamental over its harmonics. Returns -1 when there is no peak.
    """
    positions = find_positive_peaks(series, ignore)
    if not positions:
        return -1.0

    refined = [quadratic_peak(series, p) for p in positions]
    limit = cutoff * max(p.value for p in refined)

    for peak in refined:
        if peak.value >= limit:
            return peak.position

    # only reachable with cutoff > 1
    return -1.0
