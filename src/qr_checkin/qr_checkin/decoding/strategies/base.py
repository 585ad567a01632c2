from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from ...core.enums import InversionMode
from ..model import AttemptResult


class QRDecodePrimitive(ABC):
    """Strategy Pattern: a decoder working on 8-bit luminance plus an inversion policy."""

    @abstractmethod
    def decode(self, luminance: np.ndarray, inversion: InversionMode) -> AttemptResult:
        raise NotImplementedError


class BlobDecoder(ABC):
    """Independent decoder reading an encoded image file (used as last resort)."""

    @abstractmethod
    def decode_blob(self, blob: bytes) -> AttemptResult:
        raise NotImplementedError


def luminance_variants(luminance: np.ndarray, inversion: InversionMode) -> list[np.ndarray]:
    """Planes to try for an inversion policy, in order."""
    if inversion == InversionMode.NONE:
        return [luminance]
    inverted = 255 - luminance
    if inversion == InversionMode.INVERTED:
        return [inverted]
    return [luminance, inverted]
