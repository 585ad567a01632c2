from __future__ import annotations

from enum import Enum


class ScaleHint(str, Enum):
    """Target long edge used to resample an image before a decode attempt."""

    ORIGINAL = "original"
    LARGE = "800px"
    SMALL = "400px"


class InversionMode(str, Enum):
    """How luminance is fed to the decoder (dark-on-light vs light-on-dark)."""

    NONE = "none"
    INVERTED = "inverted"
    BOTH = "both"


class CheckInMode(str, Enum):
    AUTO = "auto"
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"


class CheckInAction(str, Enum):
    """Action actually recorded by the server."""

    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"


class ScanState(str, Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    PROCESSING = "processing"
    SELECT_EMPLOYEE = "select_employee"
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"


class CaptureErrorKind(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    UNAVAILABLE = "unavailable"
    NOT_READY = "not_ready"
    UNREADABLE_IMAGE = "unreadable_image"
