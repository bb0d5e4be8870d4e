import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import numpy as np
import pytest

from analysis.engine import NoteDetector
from analysis.tracker import StableNote
from tuner.controller import Tuner

SR = 16000
N = 1024


def make_detector(note=None, phase="idle"):
    frames = []
    return SimpleNamespace(
        frame_length=N,
        sample_rate=float(SR),
        frames=frames,
        update=frames.append,
        get_stable_note=lambda: note,
        phase=phase,
        reset=lambda: frames.clear(),
    )


def test_status_without_note():
    t = Tuner(detector=make_detector())
    status = t.process_frame(np.zeros(N))
    assert status["freq"] is None
    assert status["label"] == "N/A"
    assert status["stable"] is False
    assert status["phase"] == "idle"


def test_status_with_note():
    det = make_detector(StableNote(440.0, True), phase="locked")
    t = Tuner(detector=det)
    status = t.process_frame(np.zeros(N))
    assert status["note"] == 49
    assert status["label"] == "A.4"
    assert status["stable"] is True
    assert status["cents"] == pytest.approx(0.0)
    assert len(det.frames) == 1


def test_custom_reference_pitch():
    det = make_detector(StableNote(432.0, True), phase="locked")
    status = Tuner(detector=det, a4=432.0).status()
    assert status["label"] == "A.4"
    assert status["cents"] == pytest.approx(0.0)


def test_reset_delegates():
    det = make_detector()
    t = Tuner(detector=det)
    t.process_frame(np.zeros(N))
    t.reset()
    assert det.frames == []


def test_format_status():
    assert "listening" in Tuner.format_status({"freq": None})
    line = Tuner.format_status(
        {"freq": 440.0, "stable": True, "label": "A.4", "cents": 0.0}
    )
    assert line.startswith("*")
    assert "A.4" in line and "440.00 Hz" in line


def test_real_detector_end_to_end(manual_clock, tone):
    t = Tuner(sample_rate=SR, frame_length=N, taper="raw", clock=manual_clock)
    frame = tone(220.0, sr=SR, n=N)
    status = None
    for _ in range(8):
        status = t.process_frame(frame)
        manual_clock.advance(20)
    assert status["label"] == "A.3"
    assert status["stable"] is True
    assert abs(status["cents"]) < 25


def test_config_from_dict_and_file(tmp_path, manual_clock):
    t = Tuner(sample_rate=SR, frame_length=N, clock=manual_clock,
              config={"tracker": {"stable_note_ms": 10}})
    assert t.detector.config.tracker.stable_note_ms == 10.0

    path = tmp_path / "conf.json"
    path.write_text(json.dumps({"yin": {"threshold": 0.1}}))
    t = Tuner(sample_rate=SR, frame_length=N, clock=manual_clock, config=str(path))
    assert t.detector.detectors[1].conf.threshold == 0.1


def test_detector_mock_receives_frames():
    det = MagicMock()
    det.frame_length = N
    det.sample_rate = float(SR)
    det.get_stable_note.return_value = None
    det.phase = "priming"
    t = Tuner(detector=det)

    frame = np.ones(N)
    status = t.process_frame(frame)
    det.update.assert_called_once_with(frame)
    assert status["phase"] == "priming"

    t.reset()
    det.reset.assert_called_once()


def test_injected_detector_sets_rate_and_length():
    det = NoteDetector(N, SR)
    t = Tuner(detector=det)
    assert t.sample_rate == 16000
    assert t.frame_length == N


def test_format_status_without_cents():
    line = Tuner.format_status(
        {"freq": 440.0, "stable": True, "label": "A.4", "cents": None}
    )
    assert "listening" in line
