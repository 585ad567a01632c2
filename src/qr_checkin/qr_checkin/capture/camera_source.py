from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Any, Callable, Optional

import cv2
import numpy as np

from ..core.constants import (
    CAMERA_WARMUP_READS,
    DEFAULT_CAMERA_FPS,
    MSG_CAMERA_DENIED,
    MSG_CAMERA_UNAVAILABLE,
    MSG_SCANNER_NOT_READY,
)
from ..core.enums import CaptureErrorKind
from ..core.exceptions import CaptureError
from ..decoding.model import PixelBuffer
from .source import ErrorCallback, FrameCallback

logger = logging.getLogger(__name__)

STOP_JOIN_TIMEOUT_SECONDS = 2.0


def create_capture(source: str) -> cv2.VideoCapture:
    """Create VideoCapture object from index or URL."""
    try:
        idx = int(source)
        return cv2.VideoCapture(idx)
    except ValueError:
        return cv2.VideoCapture(source)


def classify_open_failure(source: str) -> CaptureError:
    """Tell "permission denied" apart from "no camera" for a failed open."""
    try:
        device = Path(f"/dev/video{int(source)}")
    except ValueError:
        return CaptureError(MSG_CAMERA_UNAVAILABLE, kind=CaptureErrorKind.UNAVAILABLE)

    if device.exists() and not os.access(device, os.R_OK | os.W_OK):
        return CaptureError(MSG_CAMERA_DENIED, kind=CaptureErrorKind.PERMISSION_DENIED)
    return CaptureError(MSG_CAMERA_UNAVAILABLE, kind=CaptureErrorKind.UNAVAILABLE)


def frame_to_buffer(frame: np.ndarray) -> PixelBuffer:
    if frame.ndim == 2:
        rgba = cv2.cvtColor(frame, cv2.COLOR_GRAY2RGBA)
    else:
        rgba = cv2.cvtColor(frame, cv2.COLOR_BGR2RGBA)
    height, width = rgba.shape[:2]
    return PixelBuffer(width=width, height=height, data=rgba.tobytes())


class CameraCaptureSource:
    """Live camera stream read on a background thread.

    Each instance owns at most one VideoCapture. ``stop`` releases it and may be
    called from any thread, including from inside ``on_frame``.
    """

    def __init__(
        self,
        source: str = "0",
        *,
        fps: int = DEFAULT_CAMERA_FPS,
        capture_factory: Callable[[str], Any] = create_capture,
        warmup_reads: int = CAMERA_WARMUP_READS,
    ):
        self._source = str(source)
        self._interval = 1.0 / max(1, int(fps))
        self._capture_factory = capture_factory
        self._warmup_reads = max(1, int(warmup_reads))

        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._capture: Any = None
        self._running = False
        self._opening = False

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self, on_frame: FrameCallback, on_error: Optional[ErrorCallback] = None) -> None:
        with self._lock:
            if self._running or self._opening:
                return
            self._opening = True
            self._stop_event.clear()

        try:
            capture = self._open()
        finally:
            with self._lock:
                self._opening = False

        with self._lock:
            if self._stop_event.is_set():
                # stop() arrived during warm-up
                capture.release()
                logger.info("Camera %s stopped before streaming", self._source)
                return
            self._capture = capture
            self._running = True
            self._thread = threading.Thread(
                target=self._run_loop,
                args=(capture, on_frame, on_error),
                name="qr-camera",
                daemon=True,
            )
            self._thread.start()
        logger.info("Camera %s started", self._source)

    def stop(self) -> None:
        with self._lock:
            thread = self._thread
            self._thread = None
            self._running = False
            self._stop_event.set()

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=STOP_JOIN_TIMEOUT_SECONDS)
        if self._release():
            logger.info("Camera %s released", self._source)

    def _open(self):
        capture = self._capture_factory(self._source)
        if not capture.isOpened():
            capture.release()
            error = classify_open_failure(self._source)
            logger.warning("Camera %s could not be opened (%s)", self._source, error.kind.value)
            raise error

        for _ in range(self._warmup_reads):
            ok, _frame = capture.read()
            if ok:
                return capture

        capture.release()
        logger.warning("Camera %s opened but delivered no frame", self._source)
        raise CaptureError(MSG_SCANNER_NOT_READY, kind=CaptureErrorKind.NOT_READY)

    def _run_loop(self, capture, on_frame: FrameCallback, on_error: Optional[ErrorCallback]) -> None:
        try:
            while not self._stop_event.is_set():
                ok, frame = capture.read()
                if ok and frame is not None:
                    on_frame(frame_to_buffer(frame))
                self._stop_event.wait(self._interval)
        except Exception:
            logger.exception("Camera %s stream failed", self._source)
            if on_error and not self._stop_event.is_set():
                on_error(CaptureError(MSG_CAMERA_UNAVAILABLE, kind=CaptureErrorKind.UNAVAILABLE))
        finally:
            with self._lock:
                self._running = False
            self._release()

    def _release(self) -> bool:
        with self._lock:
            capture = self._capture
            self._capture = None
        if capture is None:
            return False
        capture.release()
        return True
