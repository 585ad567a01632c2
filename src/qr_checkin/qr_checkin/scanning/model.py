from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..capture.source import CaptureSource
from ..core.enums import ScanState
from ..sessions.model import AlreadyDone, CheckInFailure, CheckInOutcome, CheckInSession, CheckInSuccess


@dataclass
class ScanSession:
    """Mutable state owned by exactly one ScanStateMachine.

    ``generation`` changes whenever a flow starts or is cancelled so results
    belonging to an older flow can be recognised and dropped.
    """

    state: ScanState = ScanState.IDLE
    checkin: Optional[CheckInSession] = None
    outcome: Optional[CheckInOutcome] = None
    error_message: Optional[str] = None
    capture: Optional[CaptureSource] = None
    resolving: bool = False
    generation: int = 0


@dataclass(frozen=True)
class ScanSnapshot:
    """Read-model of a ScanSession for listeners and the HTTP layer."""

    state: ScanState
    message: Optional[str] = None
    action: Optional[str] = None
    employee_name: Optional[str] = None
    employees: tuple[tuple[str, str], ...] = field(default=())
    camera_active: bool = False

    @classmethod
    def of(cls, session: ScanSession) -> "ScanSnapshot":
        message = session.error_message
        action = None
        employee_name = None
        outcome = session.outcome
        if isinstance(outcome, CheckInSuccess):
            message = outcome.message
            action = outcome.action.value
            employee_name = outcome.employee_name
        elif isinstance(outcome, (AlreadyDone, CheckInFailure)):
            message = outcome.message

        employees: tuple[tuple[str, str], ...] = ()
        if session.state == ScanState.SELECT_EMPLOYEE and session.checkin is not None:
            employees = tuple(zip(session.checkin.employee_ids, session.checkin.employee_names))

        return cls(
            state=session.state,
            message=message,
            action=action,
            employee_name=employee_name,
            employees=employees,
            camera_active=session.capture is not None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "message": self.message,
            "action": self.action,
            "employee_name": self.employee_name,
            "employees": [{"id": eid, "name": name} for eid, name in self.employees],
            "camera_active": self.camera_active,
        }
