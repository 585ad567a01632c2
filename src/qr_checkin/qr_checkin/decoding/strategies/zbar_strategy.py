from __future__ import annotations

import unicodedata

import numpy as np
from pyzbar.pyzbar import ZBarSymbol
from pyzbar.pyzbar import decode as pyzbar_decode

from ...core.enums import InversionMode
from ..model import AttemptResult
from .base import QRDecodePrimitive, luminance_variants


def _symbol_text(raw: bytes) -> str:
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        text = raw.decode("utf-8", errors="ignore")
    return unicodedata.normalize("NFC", text).strip("\x00")


class ZBarDecoder(QRDecodePrimitive):
    """Primary decoder: ZBar through pyzbar, QR symbols only."""

    def decode(self, luminance: np.ndarray, inversion: InversionMode) -> AttemptResult:
        for plane in luminance_variants(luminance, inversion):
            symbols = pyzbar_decode(np.ascontiguousarray(plane, dtype=np.uint8), symbols=[ZBarSymbol.QRCODE])
            for symbol in symbols:
                text = _symbol_text(symbol.data)
                if text:
                    return AttemptResult.success(text)
        return AttemptResult.failed()
