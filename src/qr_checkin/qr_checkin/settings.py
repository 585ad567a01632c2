from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .core.constants import (
    DEFAULT_CAMERA_FPS,
    DEFAULT_CHECKIN_ENDPOINT,
    DEFAULT_CHECKIN_TIMEOUT_SECONDS,
    DEFAULT_SUCCESS_REDIRECT_SECONDS,
)


@dataclass(frozen=True)
class ScannerSettings:
    api_base_url: str
    organization: str
    api_token: Optional[str] = None
    checkin_endpoint: str = DEFAULT_CHECKIN_ENDPOINT
    checkin_timeout: float = DEFAULT_CHECKIN_TIMEOUT_SECONDS
    camera_source: str = "0"
    camera_fps: int = DEFAULT_CAMERA_FPS
    redirect_delay: float = DEFAULT_SUCCESS_REDIRECT_SECONDS
    location: Optional[str] = None

    @classmethod
    def from_module(cls, settings: Any) -> "ScannerSettings":
        """Build from a ``config.<env>`` settings module."""
        return cls(
            api_base_url=str(getattr(settings, "API_BASE_URL")),
            organization=str(getattr(settings, "ORGANIZATION_SLUG")),
            api_token=getattr(settings, "API_TOKEN", None) or None,
            checkin_endpoint=str(getattr(settings, "CHECKIN_ENDPOINT", DEFAULT_CHECKIN_ENDPOINT)),
            checkin_timeout=float(getattr(settings, "CHECKIN_TIMEOUT_SECONDS", DEFAULT_CHECKIN_TIMEOUT_SECONDS)),
            camera_source=str(getattr(settings, "CAMERA_SOURCE", "0")),
            camera_fps=int(getattr(settings, "CAMERA_FPS", DEFAULT_CAMERA_FPS)),
            redirect_delay=float(getattr(settings, "SUCCESS_REDIRECT_SECONDS", DEFAULT_SUCCESS_REDIRECT_SECONDS)),
            location=getattr(settings, "DEFAULT_LOCATION", None) or None,
        )
