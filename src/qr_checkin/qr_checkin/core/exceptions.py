from __future__ import annotations

from typing import Any, Optional

from .enums import CaptureErrorKind


class DomainError(Exception):
    """Base exception for check-in pipeline failures."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class CaptureError(DomainError):
    """Raised when a capture source cannot deliver pixels."""

    def __init__(self, message: str, *, kind: CaptureErrorKind):
        super().__init__(message)
        self.kind = kind


class ParseError(ValidationError):
    """Raised when a decoded QR payload cannot be turned into a session."""

    def __init__(self, message: str, *, reason: str):
        super().__init__(message)
        self.reason = reason


class ResolutionError(DomainError):
    """Raised when the check-in endpoint rejects or cannot process a session."""


class CheckInRequestError(ResolutionError):
    def __init__(self, message: str, status: int = 0, data: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.status = status
        self.data = data or {}


class CheckInTimeoutError(CheckInRequestError):
    """The check-in endpoint did not answer in time."""
