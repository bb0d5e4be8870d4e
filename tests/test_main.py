import pytest

try:
    import main
except OSError as exc:  # PortAudio missing on headless CI
    pytest.skip(f"sounddevice unavailable: {exc}", allow_module_level=True)


def test_parser_defaults():
    args = main.build_parser().parse_args([])
    assert args.sample_rate == 48000
    assert args.frame_length == 2048
    assert args.taper == "hann"
    assert args.trace is False


def test_parser_rejects_unknown_taper():
    with pytest.raises(SystemExit):
        main.build_parser().parse_args(["--taper", "kaiser"])


def test_main_returns_error_when_stream_fails(monkeypatch):
    created = {}

    class DeadMic:
        def __init__(self, tuner, device=None):
            created["tuner"] = tuner
            created["device"] = device
            self.is_running = False

        def start(self):
            pass

    monkeypatch.setattr(main, "MicAnalyzer", DeadMic)
    rc = main.main(["--frame-length", "512", "--sample-rate", "16000", "--device", "3"])
    assert rc == 1
    assert created["device"] == 3
    assert created["tuner"].frame_length == 512
