# tuner/controller.py
from analysis.config import DetectorConfig, load_config
from analysis.engine import NoteDetector
from utils.music_utils import cents_off, hz_to_note, note_string


class Tuner:
    def __init__(
        self,
        sample_rate=48000,
        frame_length=2048,
        taper="hann",
        config=None,
        detector=None,
        clock=None,
        trace=None,
        a4=440.0,
    ):
        # config may be a DetectorConfig, a dict, or a path to a JSON file
        if isinstance(config, dict):
            config = DetectorConfig.from_dict(config)
        elif isinstance(config, str):
            config = load_config(config)

        # Detector: allow injection for tests, otherwise construct
        self.detector = detector or NoteDetector(
            frame_length,
            sample_rate,
            taper=taper,
            config=config,
            clock=clock,
            trace=trace,
        )
        self.sample_rate = self.detector.sample_rate
        self.frame_length = self.detector.frame_length
        self.a4 = float(a4)

    # ---------------------------------------------------------
    # Frame processing
    # ---------------------------------------------------------
    def process_frame(self, frame):
        """Feed one frame and return the current display status."""
        self.detector.update(frame)
        return self.status()

    def status(self):
        note = self.detector.get_stable_note()
        if note is None:
            return {
                "freq": None,
                "stable": False,
                "note": None,
                "label": "N/A",
                "cents": None,
                "phase": self.detector.phase,
            }

        key = hz_to_note(note.freq, self.a4)
        return {
            "freq": float(note.freq),
            "stable": bool(note.stable),
            "note": key,
            "label": note_string(key),
            "cents": cents_off(note.freq, self.a4),
            "phase": self.detector.phase,
        }

    def reset(self):
        self.detector.reset()

    @staticmethod
    def format_status(status):
        """One-line text rendering of a status dict."""
        if status.get("freq") is None or status.get("cents") is None:
            return "  --   (listening)"
        marker = "*" if status.get("stable") else " "
        return (
            f"{marker} {status['label']:<4} {status['freq']:8.2f} Hz "
            f"{status['cents']:+6.1f} cents"
        )
