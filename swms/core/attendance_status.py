"""Derive an attendance status from check-in / check-out times."""

from __future__ import annotations

from datetime import time

from swms.core.enums import AttendanceStatus

LATE_AFTER = time(9, 0)
HALF_DAY_BEFORE = time(13, 0)


def resolve_attendance_status(
    check_in: time | None,
    check_out: time | None,
    override: AttendanceStatus | None = None,
) -> AttendanceStatus:
    """Precedence: override > absent > half day > late > present.

    Half day wins over late even when the check-in was also late.
    """
    if override is not None:
        return AttendanceStatus(override)
    if check_in is None:
        return AttendanceStatus.ABSENT
    if check_out is not None and check_out < HALF_DAY_BEFORE:
        return AttendanceStatus.HALF_DAY
    if check_in > LATE_AFTER:
        return AttendanceStatus.LATE
    return AttendanceStatus.PRESENT
