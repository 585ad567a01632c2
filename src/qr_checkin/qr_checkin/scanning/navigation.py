from __future__ import annotations

import logging
import threading
from typing import Optional, Protocol

from ..core.constants import ATTENDANCE_HOME_ROUTE

logger = logging.getLogger(__name__)


class Navigator(Protocol):
    def go_to_attendance_home(self, organization: str) -> None:
        raise NotImplementedError


class RecordingNavigator:
    """Keeps the last requested route until a client picks it up."""

    def __init__(self):
        self._lock = threading.Lock()
        self._pending: Optional[str] = None

    def go_to_attendance_home(self, organization: str) -> None:
        route = ATTENDANCE_HOME_ROUTE.format(organization=organization)
        logger.info("Navigate to %s", route)
        with self._lock:
            self._pending = route

    def pop_route(self) -> Optional[str]:
        with self._lock:
            route, self._pending = self._pending, None
        return route
