# analysis/config.py
import json
from dataclasses import asdict, dataclass, field, fields


@dataclass
class AcxConfig:
    volume_min: float = 0.005
    peak_ignore: float = 0.0    # ignore peaks below this height
    peak_cutoff: float = 0.93   # first peak above this fraction of the max wins


@dataclass
class YinConfig:
    threshold: float = 0.20


@dataclass
class MpmConfig:
    peak_ignore: float = 0.25   # ignore peaks below this height
    peak_cutoff: float = 0.93   # first peak above this fraction of the max wins
    pitch_min: float = 80.0     # estimates below this (Hz) are rejected


@dataclass
class TrackerConfig:
    close_threshold: float = 0.05

    track_lone_ms: float = 100.0    # sustained single-estimator candidate
    track_cons_ms: float = 50.0     # sustained consensus candidate

    detrack_min_volume: float = 0.005
    detrack_est_none_ms: float = 500.0  # no estimates at all
    detrack_est_some_ms: float = 250.0  # estimates, none agreeing

    stable_note_ms: float = 50.0


_SECTIONS = {
    "tracker": TrackerConfig,
    "acx": AcxConfig,
    "yin": YinConfig,
    "mpm": MpmConfig,
}


def _build_section(cls, values):
    known = {f.name for f in fields(cls)}
    unknown = set(values) - known
    if unknown:
        raise ValueError(
            f"Unknown {cls.__name__} keys: {', '.join(sorted(unknown))}"
        )
    return cls(**{k: float(v) for k, v in values.items()})


@dataclass
class DetectorConfig:
    tracker: TrackerConfig = field(default_factory=TrackerConfig)
    acx: AcxConfig = field(default_factory=AcxConfig)
    yin: YinConfig = field(default_factory=YinConfig)
    mpm: MpmConfig = field(default_factory=MpmConfig)

    @classmethod
    def from_dict(cls, data):
        """Build a config from nested section dicts; missing keys keep defaults."""
        data = data or {}
        unknown = set(data) - set(_SECTIONS)
        if unknown:
            raise ValueError(
                f"Unknown config sections: {', '.join(sorted(unknown))}"
            )
        return cls(**{
            name: _build_section(section_cls, data.get(name) or {})
            for name, section_cls in _SECTIONS.items()
        })

    def to_dict(self):
        return asdict(self)


def load_config(path):
    with open(path, "r", encoding="utf-8") as f:
        return DetectorConfig.from_dict(json.load(f))
