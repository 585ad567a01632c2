from __future__ import annotations

import json
import logging
from typing import Any

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import MIN_TOKEN_LENGTH, MSG_INVALID_JSON, MSG_INVALID_TOKEN
from ..core.enums import CheckInMode
from ..core.exceptions import ParseError, ValidationError
from .model import CheckInSession

logger = logging.getLogger(__name__)

INVALID_STRUCTURED = "invalid structured payload"
INVALID_TOKEN = "invalid token"


def parse_payload(payload: str) -> CheckInSession:
    """Turn decoded QR text into a CheckInSession.

    Accepts the current bare-token format and the older JSON object carrying
    ``session_token`` plus employee fields.
    """
    text = (payload or "").strip()
    if text.startswith("{"):
        return _parse_structured(text)

    try:
        token = require_min_length(text, "session_token", MIN_TOKEN_LENGTH)
    except ValidationError as exc:
        raise ParseError(MSG_INVALID_TOKEN, reason=INVALID_TOKEN) from exc
    return CheckInSession(session_token=token)


def _parse_structured(text: str) -> CheckInSession:
    try:
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValidationError("payload is not an object")
        token = require_non_empty(data.get("session_token"), "session_token")
        ids, names = _employees(data)
        return CheckInSession(session_token=token, employee_ids=ids, employee_names=names, mode=_mode(data.get("mode")))
    except (ValueError, TypeError, RecursionError, ValidationError) as exc:
        # json.JSONDecodeError is a ValueError; absurd nesting is a RecursionError
        logger.info("Rejected structured QR payload: %s", exc)
        raise ParseError(MSG_INVALID_JSON, reason=INVALID_STRUCTURED) from exc


def _employees(data: dict[str, Any]) -> tuple[tuple[str, ...], tuple[str, ...]]:
    ids = data.get("employee_ids")
    if ids:
        if not isinstance(ids, list):
            raise ValidationError("employee_ids must be a list")
        names = data.get("employee_names")
        if names is None:
            names = [""] * len(ids)
        if not isinstance(names, list) or len(names) != len(ids):
            raise ValidationError("employee_names does not match employee_ids")
        return tuple(str(i) for i in ids), tuple("" if n is None else str(n) for n in names)

    # Legacy single-employee payload
    legacy_id = data.get("employee_id")
    if legacy_id not in (None, ""):
        name = data.get("employee_name")
        return (str(legacy_id),), ("" if name is None else str(name),)
    return (), ()


def _mode(value: Any) -> CheckInMode:
    if value is None:
        return CheckInMode.AUTO
    try:
        return CheckInMode(value)
    except ValueError:
        logger.warning("Unknown QR mode %r, using auto", value)
        return CheckInMode.AUTO
