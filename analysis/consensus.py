# analysis/consensus.py
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

AMBIGUOUS = -1.0


@dataclass(frozen=True)
class ConsensusResult:
    """
    Combined view of one frame's estimates.

      consensus > 0                  -> 2 or 3 estimators agree
      consensus == 0 and lone < 0    -> several estimates, none agreeing
      consensus == 0 and lone > 0    -> exactly one estimate
      consensus == 0 and lone == 0   -> no estimates at all
    """

    consensus: float = 0.0
    lone: float = 0.0

    @property
    def has_consensus(self):
        return self.consensus > 0

    @property
    def freq(self):
        """Frequency the tracker acts on: consensus if any, else lone."""
        return self.consensus if self.consensus > 0 else self.lone

    @property
    def is_lone(self):
        return self.consensus <= 0

    @property
    def usable(self):
        return self.consensus > 0 or self.lone > 0


def is_close(a, b, close_threshold=0.05):
    """Symmetric relative tolerance: |a - b| within close_threshold of the mean."""
    return abs(a - b) < abs(a + b) * 0.5 * close_threshold


def _v6(v):
    return f"{v:6.0f}"


def get_consensus(
    estimates: Sequence[float],
    close_threshold: float = 0.05,
    trace: Optional[Callable[[str], None]] = None,
) -> ConsensusResult:
    """Reduce per-estimator frequencies (<= 0 meaning no pitch) to a ConsensusResult."""
    positive = [float(e) for e in estimates if e > 0]

    if not positive:
        lone = 0.0
    elif len(positive) == 1:
        lone = positive[0]
    else:
        lone = AMBIGUOUS

    total = 0.0
    pairs = 0
    for i in range(len(positive)):
        for j in range(i + 1, len(positive)):
            if is_close(positive[i], positive[j], close_threshold):
                total += (positive[i] + positive[j]) / 2
                pairs += 1

    consensus = total / pairs if pairs else 0.0

    if trace is not None and (consensus or lone):
        est = "".join(_v6(e) for e in estimates)
        trace(
            f"est[{est}], consensus: {_v6(consensus)}, lone_est: {_v6(lone)}"
        )

    return ConsensusResult(consensus, lone)
