from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import BinaryIO, Optional, Union

from PIL import Image, ImageOps, UnidentifiedImageError

from ..core.constants import MSG_IMAGE_UNREADABLE
from ..core.enums import CaptureErrorKind
from ..core.exceptions import CaptureError
from ..decoding.model import PixelBuffer
from .source import ErrorCallback, FrameCallback

logger = logging.getLogger(__name__)

ImageInput = Union[str, Path, bytes, BinaryIO]


class StaticImageSource:
    """One user-supplied image delivered as exactly one RGBA buffer."""

    def __init__(self, image: ImageInput):
        self._image = image
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def load(self) -> PixelBuffer:
        fp = io.BytesIO(self._image) if isinstance(self._image, (bytes, bytearray)) else self._image
        try:
            with Image.open(fp) as img:
                # Phone photos often carry their rotation in EXIF only.
                upright = ImageOps.exif_transpose(img) or img
                rgba = upright.convert("RGBA")
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
            logger.warning("Uploaded image could not be read: %s", exc)
            raise CaptureError(MSG_IMAGE_UNREADABLE, kind=CaptureErrorKind.UNREADABLE_IMAGE) from exc

        logger.debug("Image loaded: %sx%s", rgba.width, rgba.height)
        return PixelBuffer(width=rgba.width, height=rgba.height, data=rgba.tobytes())

    def start(self, on_frame: FrameCallback, on_error: Optional[ErrorCallback] = None) -> None:
        self._running = True
        try:
            buffer = self.load()
        finally:
            self._running = False
        on_frame(buffer)

    def stop(self) -> None:
        self._running = False
