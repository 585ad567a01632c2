from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from ..core.constants import (
    DEFAULT_CHECKIN_ENDPOINT,
    DEFAULT_CHECKIN_TIMEOUT_SECONDS,
    MSG_NETWORK_ERROR,
    MSG_SERVER_ERROR,
    MSG_TIMEOUT,
    ORGANIZATION_HEADER,
    ORGANIZATION_QUERY_PARAM,
)
from ..core.exceptions import CheckInRequestError, CheckInTimeoutError
from .model import CheckInRequest

logger = logging.getLogger(__name__)


class CheckInClient:
    """HTTP client for the attendance check-in endpoint.

    The server decides whether a scan is a check-in or a check-out; this client
    only carries the session token (and optional employee) across.
    """

    def __init__(
        self,
        base_url: str,
        *,
        endpoint: str = DEFAULT_CHECKIN_ENDPOINT,
        timeout: float = DEFAULT_CHECKIN_TIMEOUT_SECONDS,
        api_token: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        self._url = base_url.rstrip("/") + "/" + endpoint.lstrip("/")
        self._timeout = float(timeout)
        self._session = session or requests.Session()
        self._session.headers.update({"Content-Type": "application/json"})
        if api_token:
            self._session.headers.update({"Authorization": f"Bearer {api_token}"})

    @property
    def url(self) -> str:
        return self._url

    def check_in(self, request: CheckInRequest, organization: str) -> dict[str, Any]:
        try:
            response = self._session.post(
                self._url,
                json=request.to_payload(),
                headers={ORGANIZATION_HEADER: organization},
                params={ORGANIZATION_QUERY_PARAM: organization},
                timeout=self._timeout,
            )
        except requests.exceptions.Timeout as exc:
            logger.warning("Check-in request timed out after %ss", self._timeout)
            raise CheckInTimeoutError(MSG_TIMEOUT) from exc
        except requests.exceptions.RequestException as exc:
            logger.warning("Check-in request failed: %s", exc)
            raise CheckInRequestError(MSG_NETWORK_ERROR) from exc

        if not response.ok:
            data = self._error_body(response)
            message = data.get("message") or data.get("detail") or MSG_SERVER_ERROR
            logger.info("Check-in rejected (%s): %s", response.status_code, data)
            raise CheckInRequestError(str(message), status=response.status_code, data=data)

        if response.status_code == 204:
            return {}
        try:
            body = response.json()
        except ValueError as exc:
            raise CheckInRequestError(MSG_SERVER_ERROR, status=response.status_code) from exc
        return body if isinstance(body, dict) else {}

    def close(self) -> None:
        self._session.close()

    @staticmethod
    def _error_body(response: requests.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            return {"message": response.reason}
        return data if isinstance(data, dict) else {"message": response.reason}
