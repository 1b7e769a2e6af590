from datetime import date, datetime
from types import SimpleNamespace

from app.models.shared.enums import AttendanceDayStatus, LeaveStatus, ShiftState
from app.services.hr.time_accounting import (
    build_attendance_calendar, count_working_days, net_work_seconds, required_hours,
    seconds_to_hours, shift_state, summarize_calendar, total_net_work_seconds
)


def make_shift(start, end=None, break_seconds=0, breaks=()):
    return SimpleNamespace(start_time=start, end_time=end, total_break_seconds=break_seconds, breaks=list(breaks))


def make_break(start, end=None, is_deleted=False):
    return SimpleNamespace(start_time=start, end_time=end, is_deleted=is_deleted)


def make_leave(day, status=LeaveStatus.APPROVED):
    return SimpleNamespace(leave_date=day, status=status)


class TestNetWorkSeconds:
    def test_completed_shift_subtracts_breaks(self):
        start = datetime(2026, 3, 2, 9, 0)
        end = datetime(2026, 3, 2, 17, 0)
        assert net_work_seconds(start, end, 1800, now=datetime(2026, 3, 3)) == 27000

    def test_open_shift_runs_until_now(self):
        start = datetime(2026, 3, 2, 9, 0)
        assert net_work_seconds(start, None, 0, now=datetime(2026, 3, 2, 10, 30)) == 5400

    def test_never_negative(self):
        start = datetime(2026, 3, 2, 9, 0)
        end = datetime(2026, 3, 2, 9, 10)
        assert net_work_seconds(start, end, 3600, now=end) == 0

    def test_total_over_several_shifts(self):
        shifts = [
            make_shift(datetime(2026, 3, 2, 9), datetime(2026, 3, 2, 17), 1800),
            make_shift(datetime(2026, 3, 3, 9), datetime(2026, 3, 3, 13), 0),
        ]
        total = total_net_work_seconds(shifts, now=datetime(2026, 3, 4))
        assert total == 27000 + 14400
        assert seconds_to_hours(total) == 11.5


class TestShiftState:
    def test_no_shift_is_not_started(self):
        assert shift_state(None) == ShiftState.NOT_STARTED

    def test_open_shift_without_break_is_active(self):
        start = datetime(2026, 3, 2, 9)
        closed_break = make_break(datetime(2026, 3, 2, 12), datetime(2026, 3, 2, 12, 30))
        assert shift_state(make_shift(start, breaks=[closed_break])) == ShiftState.ACTIVE

    def test_open_break_means_on_break(self):
        start = datetime(2026, 3, 2, 9)
        assert shift_state(make_shift(start, breaks=[make_break(datetime(2026, 3, 2, 12))])) == ShiftState.ON_BREAK

    def test_deleted_open_break_is_ignored(self):
        start = datetime(2026, 3, 2, 9)
        deleted = make_break(datetime(2026, 3, 2, 12), is_deleted=True)
        assert shift_state(make_shift(start, breaks=[deleted])) == ShiftState.ACTIVE

    def test_end_time_means_ended(self):
        shift = make_shift(datetime(2026, 3, 2, 9), datetime(2026, 3, 2, 17))
        assert shift_state(shift) == ShiftState.ENDED


class TestRequiredHours:
    def test_working_days_skip_weekend(self):
        # Monday 2 March to Sunday 8 March 2026
        assert count_working_days(date(2026, 3, 2), date(2026, 3, 8)) == 5

    def test_custom_weekend(self):
        # Friday/Saturday weekend
        assert count_working_days(date(2026, 3, 2), date(2026, 3, 8), weekend_days=[4, 5]) == 5
        assert count_working_days(date(2026, 3, 6), date(2026, 3, 7), weekend_days=[4, 5]) == 0

    def test_leave_days_reduce_required_hours(self):
        assert required_hours(5, 1, 8) == 32

    def test_required_hours_clamped_at_zero(self):
        assert required_hours(1, 3, 8) == 0


class TestAttendanceCalendar:
    start = date(2026, 3, 2)
    end = date(2026, 3, 8)
    today = date(2026, 3, 5)

    def test_past_days_default_to_unexcused_and_later_days_to_future(self):
        calendar = build_attendance_calendar(self.start, self.end, self.today, [], [])
        assert calendar[date(2026, 3, 4)]["status"] == AttendanceDayStatus.UNEXCUSED_ABSENCE
        assert calendar[self.today]["status"] == AttendanceDayStatus.FUTURE
        assert calendar[date(2026, 3, 8)]["status"] == AttendanceDayStatus.FUTURE
        assert len(calendar) == 7

    def test_approved_leave_is_excused(self):
        leaves = [make_leave(date(2026, 3, 3)), make_leave(date(2026, 3, 4), LeaveStatus.REJECTED)]
        calendar = build_attendance_calendar(self.start, self.end, self.today, [], leaves)
        assert calendar[date(2026, 3, 3)]["status"] == AttendanceDayStatus.EXCUSED_ABSENCE
        assert calendar[date(2026, 3, 4)]["status"] == AttendanceDayStatus.UNEXCUSED_ABSENCE

    def test_shift_wins_over_leave(self):
        day = date(2026, 3, 3)
        shift = make_shift(datetime(2026, 3, 3, 9), datetime(2026, 3, 3, 12))
        calendar = build_attendance_calendar(self.start, self.end, self.today, [shift], [make_leave(day)])
        assert calendar[day]["status"] == AttendanceDayStatus.PRESENT
        assert calendar[day]["shifts"] == [shift]

    def test_several_shifts_on_one_day_stay_present(self):
        first = make_shift(datetime(2026, 3, 2, 9), datetime(2026, 3, 2, 12))
        second = make_shift(datetime(2026, 3, 2, 14), None)
        calendar = build_attendance_calendar(self.start, self.end, self.today, [second, first], [])
        entry = calendar[date(2026, 3, 2)]
        assert entry["status"] == AttendanceDayStatus.PRESENT
        assert entry["shifts"] == [first, second]

    def test_rows_outside_the_range_are_ignored(self):
        outside = make_shift(datetime(2026, 3, 9, 9), datetime(2026, 3, 9, 17))
        calendar = build_attendance_calendar(self.start, self.end, self.today, [outside], [make_leave(date(2026, 3, 1))])
        assert date(2026, 3, 9) not in calendar
        assert all(not entry["shifts"] for entry in calendar.values())

    def test_summary_counts_every_status(self):
        shift = make_shift(datetime(2026, 3, 2, 9), datetime(2026, 3, 2, 17))
        calendar = build_attendance_calendar(self.start, self.end, self.today, [shift], [make_leave(date(2026, 3, 3))])
        totals = summarize_calendar(calendar)
        assert totals == {
            "present": 1,
            "excused-absence": 1,
            "unexcused-absence": 1,
            "future": 4,
        }
