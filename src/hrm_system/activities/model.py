from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class ActivityKind(str, Enum):
    """Closed set of feed entry kinds; display metadata is derived, never stored."""

    EMPLOYEE = "employee"
    TASK_ASSIGNED = "task_assigned"
    TASK_COMPLETED = "task_completed"
    PAYROLL = "payroll"
    ATTENDANCE_PRESENT = "attendance_present"
    ATTENDANCE_ABSENT = "attendance_absent"

    @property
    def family(self) -> str:
        return self.value.split("_", 1)[0]

    @property
    def icon(self) -> str:
        return _DISPLAY[self][0]

    @property
    def color(self) -> str:
        return _DISPLAY[self][1]


_DISPLAY = {
    ActivityKind.EMPLOYEE: ("users", "blue"),
    ActivityKind.TASK_ASSIGNED: ("alert-circle", "orange"),
    ActivityKind.TASK_COMPLETED: ("check-circle", "green"),
    ActivityKind.PAYROLL: ("dollar-sign", "purple"),
    ActivityKind.ATTENDANCE_PRESENT: ("calendar", "green"),
    ActivityKind.ATTENDANCE_ABSENT: ("calendar", "red"),
}

FAMILIES = ("employee", "task", "payroll", "attendance")


@dataclass(frozen=True)
class Activity:
    kind: ActivityKind
    source_id: int
    message: str
    details: str
    timestamp: Optional[datetime]

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "family": self.kind.family,
            "icon": self.kind.icon,
            "color": self.kind.color,
            "source_id": self.source_id,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(timespec="seconds") if self.timestamp else None,
        }
