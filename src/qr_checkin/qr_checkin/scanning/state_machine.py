from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional

from ..capture.image_source import ImageInput, StaticImageSource
from ..capture.source import CaptureSource
from ..core.constants import DEFAULT_SUCCESS_REDIRECT_SECONDS, MSG_CAMERA_UNAVAILABLE, MSG_IMAGE_UNREADABLE, MSG_SCAN_FAILED
from ..core.enums import ScanState
from ..core.exceptions import CaptureError, ParseError
from ..decoding.model import PixelBuffer
from ..decoding.service import ImageDecoder
from ..sessions.model import AlreadyDone, CheckInFailure, CheckInOutcome, CheckInSession, CheckInSuccess
from ..sessions.service import SessionResolver
from .model import ScanSession, ScanSnapshot
from .navigation import Navigator
from .timers import Scheduler, ThreadingScheduler, TimerHandle

logger = logging.getLogger(__name__)

Listener = Callable[[ScanSnapshot], None]

CAMERA_START_STATES = (ScanState.IDLE, ScanState.ERROR)
IMAGE_SELECT_STATES = (ScanState.IDLE, ScanState.SCANNING, ScanState.ERROR)


class ScanStateMachine:
    """Drive one QR check-in from capture to outcome.

    States: idle -> scanning -> processing -> (select_employee) -> success/info/error.
    The machine is the only owner of the capture handle: every transition out of
    ``scanning`` stops it, and each new scan builds a fresh capture. Public
    methods never raise; failures end in the ``error`` state.
    """

    def __init__(
        self,
        decoder: ImageDecoder,
        resolver: SessionResolver,
        *,
        organization: str,
        camera_factory: Callable[[], CaptureSource],
        navigator: Navigator,
        image_source_factory: Callable[[ImageInput], CaptureSource] = StaticImageSource,
        scheduler: Optional[Scheduler] = None,
        redirect_delay: float = DEFAULT_SUCCESS_REDIRECT_SECONDS,
    ):
        self._decoder = decoder
        self._resolver = resolver
        self._organization = organization
        self._camera_factory = camera_factory
        self._navigator = navigator
        self._image_source_factory = image_source_factory
        self._scheduler = scheduler or ThreadingScheduler()
        self._redirect_delay = float(redirect_delay)

        self._lock = threading.RLock()
        self._session = ScanSession()
        self._timer: Optional[TimerHandle] = None
        self._listeners: list[Listener] = []
        self._closed = False

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------
    @property
    def state(self) -> ScanState:
        return self._session.state

    def snapshot(self) -> ScanSnapshot:
        with self._lock:
            return ScanSnapshot.of(self._session)

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    # ------------------------------------------------------------------
    # User triggers
    # ------------------------------------------------------------------
    def start_camera(self) -> bool:
        with self._lock:
            if self._closed or self._session.state not in CAMERA_START_STATES:
                logger.warning("Camera start ignored in state %s", self._session.state.value)
                return False

            generation = self._begin_flow()
            capture = self._camera_factory()
            self._session.capture = capture
            self._set_state(ScanState.SCANNING)

        # Opening and warming up the camera blocks; readers of the state must not wait on it.
        try:
            capture.start(
                lambda buffer: self._on_frame(buffer, generation),
                lambda error: self._on_capture_error(error, generation),
            )
        except CaptureError as exc:
            logger.warning("Camera start failed (%s)", exc.kind.value)
            return self._abort_start(str(exc), generation)
        except Exception:
            logger.exception("Camera start failed")
            return self._abort_start(MSG_CAMERA_UNAVAILABLE, generation)
        return True

    def select_image(self, image: ImageInput) -> bool:
        with self._lock:
            if self._closed or self._session.state not in IMAGE_SELECT_STATES:
                logger.warning("Image upload ignored in state %s", self._session.state.value)
                return False
            self._release_capture()
            generation = self._begin_flow()
            self._session.resolving = True
            self._set_state(ScanState.PROCESSING)

        try:
            text = self._decode_image(image)
        except Exception:
            logger.exception("Uploaded image could not be decoded")
            text = None

        if not text:
            self._finish_with_error(MSG_IMAGE_UNREADABLE, generation)
        else:
            self._process(text, generation)
        return True

    def select_employee(self, employee_id: str) -> bool:
        with self._lock:
            checkin = self._session.checkin
            if self._session.state != ScanState.SELECT_EMPLOYEE or checkin is None:
                logger.warning("Employee selection ignored in state %s", self._session.state.value)
                return False
            generation = self._session.generation
            self._session.resolving = True
            self._set_state(ScanState.PROCESSING)

        self._resolve(checkin, str(employee_id), generation)
        return True

    def acknowledge(self) -> bool:
        """Leave a success/info screen right away."""
        with self._lock:
            if self._session.state not in (ScanState.SUCCESS, ScanState.INFO):
                return False
            self._navigate()
            return True

    def reset(self) -> None:
        with self._lock:
            self._session.generation += 1
            self._cancel_timer()
            self._release_capture()
            self._clear()
            self._set_state(ScanState.IDLE)

    def close(self) -> None:
        """Teardown: release everything and refuse new scans."""
        with self._lock:
            self.reset()
            self._closed = True

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------
    def _decode_image(self, image: ImageInput) -> Optional[str]:
        buffers: list[PixelBuffer] = []
        source = self._image_source_factory(image)
        try:
            source.start(buffers.append)
        except CaptureError:
            return None
        finally:
            source.stop()
        return self._decoder.decode(buffers[0]) if buffers else None

    def _on_frame(self, buffer: PixelBuffer, generation: int) -> None:
        with self._frame_guard() as held:
            if not held or not self._is_current(generation, ScanState.SCANNING) or self._session.resolving:
                return

        try:
            text = self._decoder.decode(buffer, allow_fallback=False)
        except Exception:
            logger.exception("Frame decode failed")
            return
        if not text:
            return

        with self._frame_guard() as held:
            if not held or not self._is_current(generation, ScanState.SCANNING) or self._session.resolving:
                return
            self._session.resolving = True
            self._release_capture()
            self._set_state(ScanState.PROCESSING)

        self._process(text, generation)

    def _on_capture_error(self, error: CaptureError, generation: int) -> None:
        with self._lock:
            if not self._is_current(generation, ScanState.SCANNING):
                return
            self._fail(str(error))

    def _process(self, text: str, generation: int) -> None:
        try:
            checkin = self._resolver.parse(text)
        except ParseError as exc:
            logger.info("QR payload rejected: %s", exc.reason)
            self._finish_with_error(str(exc), generation)
            return
        except Exception:
            logger.exception("QR payload could not be parsed")
            self._finish_with_error(MSG_SCAN_FAILED, generation)
            return

        with self._lock:
            if not self._is_current(generation, ScanState.PROCESSING):
                return
            self._session.checkin = checkin
            if checkin.is_group:
                self._session.resolving = False
                self._set_state(ScanState.SELECT_EMPLOYEE)
                return

        self._resolve(checkin, None, generation)

    def _resolve(self, checkin: CheckInSession, employee_id: Optional[str], generation: int) -> None:
        try:
            outcome: CheckInOutcome = self._resolver.resolve(checkin, self._organization, employee_id)
        except Exception:
            logger.exception("Check-in resolution failed")
            outcome = CheckInFailure(MSG_SCAN_FAILED)

        with self._lock:
            if not self._is_current(generation, ScanState.PROCESSING):
                logger.info("Discarding check-in result of a cancelled scan")
                return
            self._session.resolving = False
            self._session.checkin = None
            self._session.outcome = outcome
            if isinstance(outcome, CheckInSuccess):
                self._set_state(ScanState.SUCCESS)
                self._timer = self._scheduler.call_later(
                    self._redirect_delay, lambda: self._on_redirect_due(generation)
                )
            elif isinstance(outcome, AlreadyDone):
                self._set_state(ScanState.INFO)
            else:
                self._set_state(ScanState.ERROR)

    def _finish_with_error(self, message: str, generation: int) -> None:
        with self._lock:
            if self._session.generation != generation:
                return
            self._fail(message)

    def _abort_start(self, message: str, generation: int) -> bool:
        with self._lock:
            if self._is_current(generation, ScanState.SCANNING):
                self._fail(message)
        return False

    def _on_redirect_due(self, generation: int) -> None:
        with self._lock:
            self._timer = None
            if self._is_current(generation, ScanState.SUCCESS):
                self._navigate()

    # ------------------------------------------------------------------
    # Helpers (caller holds the lock)
    # ------------------------------------------------------------------
    @contextmanager
    def _frame_guard(self) -> Iterator[bool]:
        # Frames are disposable: never block the camera thread, stop() may be joining it.
        acquired = self._lock.acquire(blocking=False)
        try:
            yield acquired
        finally:
            if acquired:
                self._lock.release()

    def _begin_flow(self) -> int:
        self._session.generation += 1
        self._cancel_timer()
        self._clear()
        return self._session.generation

    def _is_current(self, generation: int, state: ScanState) -> bool:
        return self._session.generation == generation and self._session.state == state

    def _fail(self, message: str) -> None:
        self._release_capture()
        self._session.resolving = False
        self._session.checkin = None
        self._session.error_message = message
        self._set_state(ScanState.ERROR)

    def _navigate(self) -> None:
        self._cancel_timer()
        self._navigator.go_to_attendance_home(self._organization)
        self.reset()

    def _release_capture(self) -> None:
        capture, self._session.capture = self._session.capture, None
        if capture is not None:
            capture.stop()

    def _cancel_timer(self) -> None:
        timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()

    def _clear(self) -> None:
        self._session.checkin = None
        self._session.outcome = None
        self._session.error_message = None
        self._session.resolving = False

    def _set_state(self, state: ScanState) -> None:
        previous = self._session.state
        self._session.state = state
        if previous != state:
            logger.debug("Scan state %s -> %s", previous.value, state.value)
        snapshot = ScanSnapshot.of(self._session)
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Scan state listener failed")

    def __enter__(self) -> "ScanStateMachine":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
