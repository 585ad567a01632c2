from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import InversionMode, ScaleHint


@dataclass(frozen=True)
class PixelBuffer:
    """Interleaved RGBA pixels handed from a capture source to the decoder."""

    width: int
    height: int
    data: bytes

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Invalid buffer size {self.width}x{self.height}")
        expected = self.width * self.height * 4
        if len(self.data) != expected:
            raise ValueError(f"RGBA buffer needs {expected} bytes, got {len(self.data)}")


@dataclass(frozen=True)
class DecodeAttempt:
    index: int
    scale_hint: ScaleHint
    inversion_mode: InversionMode


@dataclass(frozen=True)
class AttemptResult:
    """Outcome of one decode attempt: either decoded text or a failure reason."""

    text: Optional[str] = None
    failure: Optional[str] = None

    @property
    def ok(self) -> bool:
        return bool(self.text)

    @classmethod
    def success(cls, text: str) -> "AttemptResult":
        return cls(text=text)

    @classmethod
    def failed(cls, reason: str = "no QR code found") -> "AttemptResult":
        return cls(failure=reason)


@dataclass(frozen=True)
class DecodeReport:
    """Read-model describing how a buffer was (or was not) decoded."""

    text: Optional[str]
    attempt: Optional[DecodeAttempt]
    attempts_tried: int
    used_fallback: bool
