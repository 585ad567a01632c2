from __future__ import annotations

import logging
from typing import Any, Optional

from ..core.constants import ALREADY_DONE_MARKERS, ERROR_MESSAGE_FIELDS, MSG_CHECKIN_DEFAULT_ERROR, MSG_UNEXPECTED_RESPONSE
from ..core.enums import CheckInAction
from ..core.exceptions import CheckInRequestError
from .gateway import CheckInGateway
from .model import AlreadyDone, CheckInFailure, CheckInOutcome, CheckInRequest, CheckInSession, CheckInSuccess
from .parser import parse_payload

logger = logging.getLogger(__name__)


def extract_error_message(data: dict[str, Any], fallback: Optional[str] = None) -> str:
    """First usable message among the known error fields, in priority order."""
    for field_name in ERROR_MESSAGE_FIELDS:
        value = data.get(field_name)
        if isinstance(value, list):
            value = value[0] if value else None
        if value:
            return str(value)
    return fallback or MSG_CHECKIN_DEFAULT_ERROR


def is_already_done(message: str) -> bool:
    return any(marker in message for marker in ALREADY_DONE_MARKERS)


class SessionResolver:
    """Use case: exchange a decoded QR session for a check-in outcome."""

    def __init__(self, gateway: CheckInGateway, *, location: Optional[str] = None):
        self._gateway = gateway
        self._location = location

    def parse(self, payload: str) -> CheckInSession:
        return parse_payload(payload)

    def resolve(
        self,
        session: CheckInSession,
        organization: str,
        employee_id: Optional[str] = None,
        *,
        notes: Optional[str] = None,
    ) -> CheckInOutcome:
        if employee_id is None and session.employee_count == 1:
            employee_id = session.employee_ids[0]

        request = CheckInRequest(
            session_token=session.session_token,
            employee_id=employee_id,
            location=self._location,
            notes=notes,
        )
        try:
            response = self._gateway.check_in(request, organization)
        except CheckInRequestError as exc:
            return self._classify(exc)

        try:
            action = CheckInAction(response.get("action"))
        except ValueError:
            logger.warning("Check-in response without a valid action: %s", response)
            return CheckInFailure(MSG_UNEXPECTED_RESPONSE)

        employee_name = response.get("employee_name") or (session.employee_name(employee_id) if employee_id else None)
        return CheckInSuccess(
            action=action,
            message=str(response.get("message") or ""),
            employee_name=employee_name or "",
        )

    def _classify(self, exc: CheckInRequestError) -> CheckInOutcome:
        message = extract_error_message(exc.data, fallback=str(exc) or None)
        if is_already_done(message):
            logger.info("Check-in already recorded: %s", message)
            return AlreadyDone(message)
        logger.info("Check-in failed (%s): %s", exc.status, message)
        return CheckInFailure(message, status=exc.status)
