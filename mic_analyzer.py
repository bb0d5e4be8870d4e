# mic_analyzer.py
import logging
import queue
import threading
from typing import Any, Optional

import numpy as np
import sounddevice as sd

logger = logging.getLogger(__name__)


class MicAnalyzer:
    """Real-time microphone capture feeding fixed-size frames to a Tuner."""

    def __init__(
        self,
        tuner,
        sample_rate: Optional[int] = None,
        processing_queue_max: int = 8,
        results_queue: Optional[queue.Queue] = None,
        device: Optional[Any] = None,
    ) -> None:
        self.tuner = tuner
        self.sample_rate = int(sample_rate or tuner.sample_rate)
        self.frame_length = int(tuner.frame_length)
        self.device = device
        self.stream: Optional[sd.InputStream] = None

        self.processing_queue: queue.Queue = queue.Queue(
            maxsize=int(processing_queue_max)
        )
        self.results_queue: queue.Queue = (
            results_queue if results_queue is not None
            else queue.Queue(maxsize=200)
        )
        self._worker_stop = threading.Event()
        self._worker: Optional[threading.Thread] = None

        self.dropped_frames = 0
        self.is_running = False

    # -------------------------
    # Audio callback (fast)
    # -------------------------
    def audio_callback(
        self, indata: np.ndarray, _frames: int, _time_info: Any, status: Any
    ) -> None:
        """Sounddevice callback: copy the mono frame and enqueue it."""
        if status:
            logger.debug("Input stream status: %s", status)
        try:
            mono = np.array(indata[:, 0], dtype=float)
            if mono.size != self.frame_length:
                # short final block when the stream stops
                return
            try:
                self.processing_queue.put_nowait(mono)
            except queue.Full:
                # worker is behind; drop rather than block the audio thread
                self.dropped_frames += 1
        except Exception:  # noqa: BLE001
            logger.exception("MicAnalyzer audio callback failed")

    # -------------------------
    # Worker thread
    # -------------------------
    def _processing_worker(self) -> None:
        """Background worker: run frames through the tuner, post status dicts."""
        while not self._worker_stop.is_set():
            try:
                frame = self.processing_queue.get(timeout=0.2)
            except queue.Empty:
                continue

            try:
                if self._worker_stop.is_set():
                    break
                status = self.tuner.process_frame(frame)
                try:
                    self.results_queue.put(status, timeout=0.1)
                except queue.Full:
                    # drop if consumer is behind
                    pass
            except Exception:  # noqa: BLE001
                logger.exception(
                    "Processing worker failed while handling a frame"
                )
            finally:
                self.processing_queue.task_done()

    # -------------------------
    # Public control
    # -------------------------
    def start(self) -> None:
        """Start worker thread and audio stream."""
        if self._worker is None or not self._worker.is_alive():
            self._worker_stop.clear()
            self._worker = threading.Thread(
                target=self._processing_worker, daemon=True
            )
            self._worker.start()
            logger.info("MicAnalyzer worker started")

        if self.stream is None:
            try:
                self.stream = sd.InputStream(
                    samplerate=self.sample_rate,
                    blocksize=self.frame_length,
                    channels=1,
                    dtype="float32",
                    device=self.device,
                    callback=self.audio_callback,
                )
                self.stream.start()
                self.is_running = True
                logger.info(
                    "MicAnalyzer audio stream started at %d Hz blocksize %d",
                    self.sample_rate,
                    self.frame_length,
                )
            except Exception:  # noqa: BLE001
                logger.exception("Failed to start audio stream")
                # ensure worker is stopped if stream fails
                self.stop()

    def stop(self, _event: Optional[Any] = None) -> None:
        """Stop audio stream and worker thread."""
        if self.stream is not None:
            try:
                if getattr(self.stream, "active", False):
                    self.stream.stop()
                self.stream.close()
            except Exception:  # noqa: BLE001
                logger.exception("Error stopping audio stream")
            self.stream = None
            logger.info("MicAnalyzer audio stream stopped")

        if self._worker is not None:
            self._worker_stop.set()
            self._worker.join(timeout=1.0)
            self._worker = None
            logger.info("MicAnalyzer worker stopped")

        self.is_running = False
        if self.dropped_frames:
            logger.info("MicAnalyzer dropped %d frames", self.dropped_frames)
