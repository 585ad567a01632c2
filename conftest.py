from __future__ import annotations

import io
from typing import Callable

import numpy as np
import pytest
from PIL import Image

from src.qr_checkin.qr_checkin.decoding.model import PixelBuffer


def image_to_buffer(img: Image.Image) -> PixelBuffer:
    rgba = img.convert("RGBA")
    return PixelBuffer(width=rgba.width, height=rgba.height, data=rgba.tobytes())


def image_to_png(img: Image.Image) -> bytes:
    out = io.BytesIO()
    img.save(out, format="PNG")
    return out.getvalue()


def solid_buffer(width: int, height: int, rgba: tuple[int, int, int, int] = (255, 255, 255, 255)) -> PixelBuffer:
    pixels = np.empty((height, width, 4), dtype=np.uint8)
    pixels[:, :] = rgba
    return PixelBuffer(width=width, height=height, data=pixels.tobytes())


@pytest.fixture
def make_qr() -> Callable[..., Image.Image]:
    """Render a QR code as an RGBA Pillow image."""
    qrcode = pytest.importorskip("qrcode")

    def _make(data: str, *, box_size: int = 8, border: int = 4, inverted: bool = False) -> Image.Image:
        qr = qrcode.QRCode(error_correction=qrcode.constants.ERROR_CORRECT_M, box_size=box_size, border=border)
        qr.add_data(data)
        qr.make(fit=True)
        fill, back = ("white", "black") if inverted else ("black", "white")
        return qr.make_image(fill_color=fill, back_color=back).get_image().convert("RGBA")

    return _make


@pytest.fixture
def white_buffer() -> PixelBuffer:
    return solid_buffer(64, 48)
