"""
Time accounting rules for shifts, breaks and the attendance calendar.

Everything here is pure: callers pass rows (or anything shaped like them)
and an explicit ``now``/``today`` so the rules can be exercised without a
database.
"""
from collections import OrderedDict
from datetime import date, datetime
from typing import Any, Dict, Iterable, Optional, Sequence

from app.models.shared.enums import AttendanceDayStatus, LeaveStatus, ShiftState
from app.utils.date_time_utils import iter_days

DEFAULT_WEEKEND_DAYS = (5, 6)  # Saturday, Sunday


def elapsed_seconds(start: datetime, end: datetime) -> int:
    """Whole seconds from start to end, never negative"""
    return max(0, int((end - start).total_seconds()))


def net_work_seconds(
    start_time: datetime,
    end_time: Optional[datetime],
    total_break_seconds: int,
    now: datetime,
) -> int:
    """(end or now) - start - breaks, clamped at zero"""
    effective_end = end_time or now
    return max(0, elapsed_seconds(start_time, effective_end) - (total_break_seconds or 0))


def shift_state(shift: Any) -> ShiftState:
    """State of a single shift row"""
    if shift is None:
        return ShiftState.NOT_STARTED
    if shift.end_time is not None:
        return ShiftState.ENDED
    if any(b.end_time is None and not b.is_deleted for b in shift.breaks):
        return ShiftState.ON_BREAK
    return ShiftState.ACTIVE


def seconds_to_hours(seconds: int, ndigits: int = 1) -> float:
    return round(seconds / 3600, ndigits)


def count_working_days(
    start_date: date,
    end_date: date,
    weekend_days: Sequence[int] = DEFAULT_WEEKEND_DAYS,
) -> int:
    return sum(1 for day in iter_days(start_date, end_date) if day.weekday() not in weekend_days)


def required_hours(working_days: int, approved_leave_days: int, default_shift_hours: float) -> float:
    return max(0, working_days - approved_leave_days) * default_shift_hours


def build_attendance_calendar(
    start_date: date,
    end_date: date,
    today: date,
    shifts: Iterable[Any],
    leaves: Iterable[Any],
) -> "OrderedDict[date, Dict[str, Any]]":
    """
    Classify each day of [start_date, end_date].

    Days before ``today`` default to an unexcused absence, later days to
    ``future``. Approved leaves are laid down first and shifts on top, so a
    day with both is always ``present``. Only approved leaves should be
    passed in; anything else is ignored.
    """
    calendar: "OrderedDict[date, Dict[str, Any]]" = OrderedDict()
    for day in iter_days(start_date, end_date):
        status = AttendanceDayStatus.UNEXCUSED_ABSENCE if day < today else AttendanceDayStatus.FUTURE
        calendar[day] = {"status": status, "shifts": [], "leave": None}

    for leave in leaves:
        entry = calendar.get(leave.leave_date)
        if entry is None or getattr(leave, "status", LeaveStatus.APPROVED) != LeaveStatus.APPROVED:
            continue
        entry["status"] = AttendanceDayStatus.EXCUSED_ABSENCE
        entry["leave"] = leave

    for shift in sorted(shifts, key=lambda s: s.start_time):
        entry = calendar.get(shift.start_time.date())
        if entry is None:
            continue
        # First shift establishes presence; later ones only append
        entry["status"] = AttendanceDayStatus.PRESENT
        entry["shifts"].append(shift)

    return calendar


def total_net_work_seconds(shifts: Iterable[Any], now: datetime) -> int:
    return sum(
        net_work_seconds(s.start_time, s.end_time, s.total_break_seconds, now)
        for s in shifts
    )


def summarize_calendar(calendar: Dict[date, Dict[str, Any]]) -> Dict[str, int]:
    counts: Dict[str, int] = {status.value: 0 for status in AttendanceDayStatus}
    for entry in calendar.values():
        counts[entry["status"].value] += 1
    return counts
