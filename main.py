import argparse
import logging
import queue

from analysis.engine import logger_trace
from analysis.windowing import TAPERS
from mic_analyzer import MicAnalyzer
from tuner.controller import Tuner

logger = logging.getLogger(__name__)


def build_parser():
    p = argparse.ArgumentParser(description="Live monophonic note detector")
    p.add_argument("--sample-rate", type=int, default=48000)
    p.add_argument("--frame-length", type=int, default=2048)
    p.add_argument("--taper", choices=sorted(TAPERS), default="hann")
    p.add_argument("--config", help="JSON file overriding detector settings")
    p.add_argument("--device", help="sounddevice input device name or index")
    p.add_argument("--trace", action="store_true",
                   help="log per-frame consensus and tracking events")
    p.add_argument("--debug", action="store_true")
    return p


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug or args.trace else logging.INFO,
        format="%(asctime)s %(levelname)s: %(message)s",
    )

    device = args.device
    if device is not None and device.isdigit():
        device = int(device)

    tuner = Tuner(
        sample_rate=args.sample_rate,
        frame_length=args.frame_length,
        taper=args.taper,
        config=args.config,
        trace=logger_trace(logger) if args.trace else None,
    )
    mic = MicAnalyzer(tuner, device=device)
    mic.start()
    if not mic.is_running:
        return 1

    last = None
    try:
        while True:
            try:
                status = mic.results_queue.get(timeout=0.5)
            except queue.Empty:
                continue
            line = Tuner.format_status(status)
            if line != last:
                print(line, flush=True)
                last = line
    except KeyboardInterrupt:
        pass
    finally:
        mic.stop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
