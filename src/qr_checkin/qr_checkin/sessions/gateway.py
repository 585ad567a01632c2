from __future__ import annotations

from typing import Any, Protocol

from .model import CheckInRequest


class CheckInGateway(Protocol):
    def check_in(self, request: CheckInRequest, organization: str) -> dict[str, Any]:
        """Submit a scan; raise CheckInRequestError when the server rejects it."""

        raise NotImplementedError
