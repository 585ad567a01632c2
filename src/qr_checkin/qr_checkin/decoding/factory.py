from __future__ import annotations

from dataclasses import dataclass, field

from ..core.enums import InversionMode, ScaleHint
from .model import DecodeAttempt


@dataclass
class DecodeAttemptFactory:
    """Factory Pattern: build the fixed, ordered plan of decode attempts.

    The order is part of the contract (original -> 800px -> 400px, and for each
    scale none -> inverted -> both); never reorder it.
    """

    scale_hints: tuple[ScaleHint, ...] = field(default=(ScaleHint.ORIGINAL, ScaleHint.LARGE, ScaleHint.SMALL))
    inversion_modes: tuple[InversionMode, ...] = field(
        default=(InversionMode.NONE, InversionMode.INVERTED, InversionMode.BOTH)
    )

    def plan(self) -> list[DecodeAttempt]:
        attempts: list[DecodeAttempt] = []
        for scale in self.scale_hints:
            for inversion in self.inversion_modes:
                attempts.append(DecodeAttempt(index=len(attempts) + 1, scale_hint=scale, inversion_mode=inversion))
        return attempts
