from __future__ import annotations

import cv2
import numpy as np

from ..model import AttemptResult
from .base import BlobDecoder


class OpenCVBlobDecoder(BlobDecoder):
    """Fallback decoder: OpenCV's QRCodeDetector reading an encoded image file."""

    def decode_blob(self, blob: bytes) -> AttemptResult:
        image = cv2.imdecode(np.frombuffer(blob, dtype=np.uint8), cv2.IMREAD_COLOR)
        if image is None:
            return AttemptResult.failed("blob is not a readable image")

        detector = cv2.QRCodeDetector()
        data, points, _ = detector.detectAndDecode(image)
        if points is not None and data:
            return AttemptResult.success(data)
        return AttemptResult.failed()
