import logging
from typing import Optional
from datetime import date, datetime
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationError
from app.schemas.hr.attendance_schema import AttendanceCalendarResponse, AttendanceDay
from app.schemas.hr.leave_request_schema import ApprovedLeaveItem
from app.services.auth.user_service import UserService
from app.services.hr.leave_request_service import LeaveRequestService
from app.services.hr.shift_service import ShiftService, build_shift_response
from app.services.hr.time_accounting import (
    build_attendance_calendar, count_working_days, required_hours,
    seconds_to_hours, summarize_calendar, total_net_work_seconds
)
from app.services.organization.company_service import CompanyService
from app.utils.date_time_utils import month_bounds, utc_now

logger = logging.getLogger(__name__)

class AttendanceService:
    """Per-day attendance built from shifts and approved leaves"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_service = UserService(session)
        self.shift_service = ShiftService(session)
        self.leave_request_service = LeaveRequestService(session)
        self.company_service = CompanyService(session)

    async def get_calendar(
        self,
        user_id: int,
        start_date: date,
        end_date: date,
        now: Optional[datetime] = None
    ) -> AttendanceCalendarResponse:
        if end_date < start_date:
            raise ValidationError.for_field("end_date", "end_date must be on or after start_date")

        user = await self.user_service.get_user_or_404(user_id)
        shift_settings = await self.company_service.get_shift_settings(user)
        now = now or utc_now()

        shifts = await self.shift_service.get_shifts_in_range(user_id, start_date, end_date)
        leaves = await self.leave_request_service.get_approved_leaves(user_id, start_date, end_date)
        calendar = build_attendance_calendar(start_date, end_date, now.date(), shifts, leaves)

        weekend_days = shift_settings.weekend_days
        working_days = count_working_days(start_date, end_date, weekend_days)
        # Leave on a weekend does not reduce the required hours
        approved_leave_days = len({l.leave_date for l in leaves if l.leave_date.weekday() not in weekend_days})

        days = {
            day: AttendanceDay(
                status=entry["status"],
                shifts=[build_shift_response(s, now) for s in entry["shifts"]],
                leave=ApprovedLeaveItem.model_validate(entry["leave"]) if entry["leave"] is not None else None,
            )
            for day, entry in calendar.items()
        }

        logger.debug(f"Attendance for user {user_id} {start_date}..{end_date}: {len(shifts)} shifts, {len(leaves)} leaves")

        return AttendanceCalendarResponse(
            user_id=user_id,
            start_date=start_date,
            end_date=end_date,
            days=days,
            totals=summarize_calendar(calendar),
            working_days=working_days,
            approved_leave_days=approved_leave_days,
            default_shift_hours=shift_settings.default_shift_hours,
            required_hours=required_hours(working_days, approved_leave_days, shift_settings.default_shift_hours),
            actual_hours=seconds_to_hours(total_net_work_seconds(shifts, now), 1),
        )

    async def get_month_calendar(self, user_id: int, month: str, now: Optional[datetime] = None) -> AttendanceCalendarResponse:
        try:
            first_day, last_day = month_bounds(month)
        except ValueError as e:
            raise ValidationError.for_field("month", str(e))
        return await self.get_calendar(user_id, first_day, last_day, now)
