import os, argparse
import numpy as np
import soundfile as sf
import pandas as pd

from analysis.clock import ManualClock
from tuner.controller import Tuner


def replay_file(path, frame_length=2048, taper="hann", config=None):
    """Run a recording through a fresh Tuner, one non-overlapping frame at a time."""
    y, sr = sf.read(path, dtype="float64", always_2d=True)
    mono = y.mean(axis=1)

    clock = ManualClock()
    tuner = Tuner(sample_rate=sr, frame_length=frame_length, taper=taper,
                  config=config, clock=clock)
    frame_ms = 1000.0 * frame_length / sr

    statuses = []
    for start in range(0, len(mono) - frame_length + 1, frame_length):
        statuses.append(tuner.process_frame(mono[start:start + frame_length]))
        clock.advance(frame_ms)
    return sr, statuses


def analyze_file(path, frame_length=2048, taper="hann", config=None):
    sr, statuses = replay_file(path, frame_length, taper, config)

    stable = [s for s in statuses if s["stable"]]
    notes = []
    for s in stable:
        if not notes or notes[-1] != s["label"]:
            notes.append(s["label"])

    return {"path": path, "sr": sr, "frames": len(statuses),
            "locked_frames": sum(1 for s in statuses if s["freq"] is not None),
            "stable_frames": len(stable),
            "notes": " ".join(notes),
            "median_hz": float(np.median([s["freq"] for s in stable])) if stable else None}


def run_batch(input_dir, out_csv="report.csv", frame_length=2048, taper="hann", config=None):
    files = sorted(os.path.join(input_dir, f) for f in os.listdir(input_dir) if f.endswith(".wav"))
    rows = [analyze_file(p, frame_length, taper, config) for p in files]
    pd.DataFrame(rows).to_csv(out_csv, index=False)
    silent = sum(1 for r in rows if not r["stable_frames"])
    print(f"Analyzed {len(rows)} files: {silent} without a stable note")
    return 0 if silent == 0 else 2

if __name__ == "__main__":
    p = argparse.ArgumentParser()
    p.add_argument("--input-dir", required=True)
    p.add_argument("--out", default="report.csv")
    p.add_argument("--frame-length", type=int, default=2048)
    p.add_argument("--taper", default="hann")
    p.add_argument("--config", help="JSON detector config")
    args = p.parse_args()
    rc = run_batch(args.input_dir, out_csv=args.out, frame_length=args.frame_length,
                   taper=args.taper, config=args.config)
    raise SystemExit(rc)
