from __future__ import annotations

import io
import logging
from typing import Optional

import cv2
import numpy as np
from PIL import Image

from ..core.constants import SCALE_TARGETS
from ..core.enums import ScaleHint
from .factory import DecodeAttemptFactory
from .model import AttemptResult, DecodeAttempt, DecodeReport, PixelBuffer
from .strategies.base import BlobDecoder, QRDecodePrimitive

logger = logging.getLogger(__name__)


def target_size(width: int, height: int, scale: ScaleHint) -> tuple[int, int]:
    """Dimensions for a scale hint, keeping the aspect ratio."""
    long_edge = SCALE_TARGETS[scale]
    if long_edge is None:
        return width, height
    factor = long_edge / float(max(width, height))
    return max(1, int(round(width * factor))), max(1, int(round(height * factor)))


def composite_on_white(buffer: PixelBuffer) -> np.ndarray:
    """RGB image of the buffer drawn over a solid white background."""
    rgba = np.frombuffer(buffer.data, dtype=np.uint8).reshape(buffer.height, buffer.width, 4)
    alpha = rgba[:, :, 3:4].astype(np.float32) / 255.0
    rgb = rgba[:, :, :3].astype(np.float32) * alpha + 255.0 * (1.0 - alpha)
    return np.clip(np.rint(rgb), 0, 255).astype(np.uint8)


def render_luminance(rgb: np.ndarray, size: tuple[int, int]) -> np.ndarray:
    height, width = rgb.shape[:2]
    if size != (width, height):
        shrinking = size[0] < width
        rgb = cv2.resize(rgb, size, interpolation=cv2.INTER_AREA if shrinking else cv2.INTER_CUBIC)
    return cv2.cvtColor(rgb, cv2.COLOR_RGB2GRAY)


def encode_png(buffer: PixelBuffer) -> bytes:
    image = Image.frombytes("RGBA", (buffer.width, buffer.height), buffer.data)
    out = io.BytesIO()
    image.save(out, format="PNG")
    return out.getvalue()


class ImageDecoder:
    """Extract a QR payload from raw pixels.

    Runs the ordered scale x inversion plan against the primary decoder and
    stops at the first hit. Only when every attempt failed is the original
    image handed, as a PNG blob, to the independent fallback decoder.
    "No QR code" is a normal ``None`` result, never an exception.
    """

    def __init__(
        self,
        primary: QRDecodePrimitive,
        fallback: Optional[BlobDecoder] = None,
        *,
        attempt_factory: DecodeAttemptFactory | None = None,
    ):
        self._primary = primary
        self._fallback = fallback
        self._plan = (attempt_factory or DecodeAttemptFactory()).plan()

    @property
    def plan(self) -> list[DecodeAttempt]:
        return list(self._plan)

    def decode(self, buffer: PixelBuffer, *, allow_fallback: bool = True) -> Optional[str]:
        return self.decode_with_report(buffer, allow_fallback=allow_fallback).text

    def decode_with_report(self, buffer: PixelBuffer, *, allow_fallback: bool = True) -> DecodeReport:
        rgb = composite_on_white(buffer)
        planes: dict[ScaleHint, np.ndarray] = {}

        for attempt in self._plan:
            result = self._run_attempt(attempt, rgb, planes)
            if result.ok:
                logger.info(
                    "QR decoded on attempt %s/%s (scale=%s, inversion=%s)",
                    attempt.index,
                    len(self._plan),
                    attempt.scale_hint.value,
                    attempt.inversion_mode.value,
                )
                return DecodeReport(text=result.text, attempt=attempt, attempts_tried=attempt.index, used_fallback=False)
            logger.debug("Decode attempt %s failed: %s", attempt.index, result.failure)

        if not allow_fallback or self._fallback is None:
            return DecodeReport(text=None, attempt=None, attempts_tried=len(self._plan), used_fallback=False)

        result = self._run_fallback(buffer)
        if result.ok:
            logger.info("QR decoded by fallback decoder")
        else:
            logger.info("No QR code found after %s attempts and fallback", len(self._plan))
        return DecodeReport(
            text=result.text if result.ok else None,
            attempt=None,
            attempts_tried=len(self._plan),
            used_fallback=True,
        )

    def _run_attempt(self, attempt: DecodeAttempt, rgb: np.ndarray, planes: dict[ScaleHint, np.ndarray]) -> AttemptResult:
        try:
            plane = planes.get(attempt.scale_hint)
            if plane is None:
                height, width = rgb.shape[:2]
                plane = render_luminance(rgb, target_size(width, height, attempt.scale_hint))
                planes[attempt.scale_hint] = plane
            return self._primary.decode(plane, attempt.inversion_mode)
        except Exception as exc:
            return AttemptResult.failed(f"{type(exc).__name__}: {exc}")

    def _run_fallback(self, buffer: PixelBuffer) -> AttemptResult:
        try:
            return self._fallback.decode_blob(encode_png(buffer))
        except Exception as exc:
            logger.debug("Fallback decoder raised %s", exc)
            return AttemptResult.failed(f"{type(exc).__name__}: {exc}")
