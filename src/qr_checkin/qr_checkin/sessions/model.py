from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from ..core.enums import CheckInAction, CheckInMode


@dataclass(frozen=True)
class CheckInSession:
    """Thực thể miền (domain): phiên chấm công đọc từ mã QR.

    Bare-token payloads carry no employees; the server resolves them.
    """

    session_token: str
    employee_ids: tuple[str, ...] = ()
    employee_names: tuple[str, ...] = ()
    mode: CheckInMode = CheckInMode.AUTO

    def __post_init__(self) -> None:
        if not self.session_token:
            raise ValueError("session_token is required")
        if len(self.employee_ids) != len(self.employee_names):
            raise ValueError("employee_ids and employee_names must have the same length")

    @property
    def employee_count(self) -> int:
        return len(self.employee_ids)

    @property
    def is_group(self) -> bool:
        return self.employee_count > 1

    def employee_name(self, employee_id: str) -> Optional[str]:
        for eid, name in zip(self.employee_ids, self.employee_names):
            if eid == employee_id:
                return name
        return None


@dataclass(frozen=True)
class CheckInRequest:
    session_token: str
    employee_id: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None

    def to_payload(self) -> dict[str, str]:
        payload = {
            "session_token": self.session_token,
            "employee_id": self.employee_id,
            "location": self.location,
            "notes": self.notes,
        }
        return {k: v for k, v in payload.items() if v is not None}


@dataclass(frozen=True)
class CheckInSuccess:
    action: CheckInAction
    message: str
    employee_name: str = ""


@dataclass(frozen=True)
class AlreadyDone:
    """Informational: the employee already checked in/out. Not an error."""

    message: str


@dataclass(frozen=True)
class CheckInFailure:
    message: str
    status: int = field(default=0, compare=False)


CheckInOutcome = Union[CheckInSuccess, AlreadyDone, CheckInFailure]
