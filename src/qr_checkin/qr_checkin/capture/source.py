from __future__ import annotations

from typing import Callable, Optional, Protocol

from ..core.exceptions import CaptureError
from ..decoding.model import PixelBuffer

FrameCallback = Callable[[PixelBuffer], None]
ErrorCallback = Callable[[CaptureError], None]


class CaptureSource(Protocol):
    """Something that produces pixel buffers until stopped.

    ``start`` raises CaptureError when the source cannot be opened; failures
    after streaming began are reported through ``on_error``. ``stop`` is
    idempotent and must release any hardware handle.
    """

    @property
    def is_running(self) -> bool:
        raise NotImplementedError

    def start(self, on_frame: FrameCallback, on_error: Optional[ErrorCallback] = None) -> None:
        raise NotImplementedError

    def stop(self) -> None:
        raise NotImplementedError
