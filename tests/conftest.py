# tests/conftest.py
import functools

import numpy as np
import pytest

from analysis.synthetic import synthetic_tone

SR = 16000
FRAME = 1024


@pytest.fixture
def tone():
    """synthetic_tone with test defaults: 16 kHz, 1024 samples, phase 0.3."""
    return functools.partial(synthetic_tone, sr=SR, n=FRAME, phase=0.3)


@pytest.fixture
def silence():
    return np.zeros(FRAME)


class FakeEstimator:
    """Records sensitivity changes; returns a fixed estimate."""

    def __init__(self, value=-1.0):
        self.value = value
        self.factors = []

    def process(self, buf):
        return self.value

    def adjust_sensitivity(self, factor):
        self.factors.append(factor)


@pytest.fixture
def fake_estimators():
    """Three recording stand-ins in ACX, YIN, MPM order."""
    return [FakeEstimator(), FakeEstimator(), FakeEstimator()]
