import pytest
from datetime import date, datetime
from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import InvalidStateTransitionError, NotFoundError, ValidationError
from app.models.shared.enums import AttendanceDayStatus, LeaveStatus, NotificationCategory
from app.schemas.hr.leave_request_schema import LeaveRequestCreate, LeaveRequestReview
from app.schemas.hr.shift_schema import ShiftCreate
from app.services.hr.attendance_service import AttendanceService
from app.services.hr.leave_request_service import LeaveRequestService
from app.services.hr.shift_service import ShiftService
from app.services.notification.notification_service import NotificationService


async def approved_leave(session, user, day, reviewer=None):
    service = LeaveRequestService(session)
    leave = await service.create_leave_request(LeaveRequestCreate(user_id=user.id, leave_type="Annual", leave_date=day))
    return await service.review_leave_request(
        leave.id, LeaveRequestReview(status=LeaveStatus.APPROVED, reviewed_by=reviewer.id if reviewer else None)
    )


@pytest.mark.asyncio
class TestLeaveRequests:
    """Leave request lifecycle and the notifications it produces"""

    async def test_create_is_pending_and_notifies_reviewers(self, session, company_employee, company_manager, company_admin):
        service = LeaveRequestService(session)
        leave = await service.create_leave_request(
            LeaveRequestCreate(user_id=company_employee.id, leave_type=" Sick ", leave_date=date(2026, 3, 3))
        )

        assert leave.status == LeaveStatus.PENDING
        assert leave.leave_type == "Sick"
        assert leave.user.id == company_employee.id

        notifications = NotificationService(session)
        assert await notifications.get_unread_count(company_manager.id) == 1
        assert await notifications.get_unread_count(company_admin.id) == 1
        assert await notifications.get_unread_count(company_employee.id) == 0

        manager_inbox = await notifications.get_user_notifications(company_manager.id)
        assert manager_inbox[0].category == NotificationCategory.LEAVE_REQUEST
        assert manager_inbox[0].reference_id == leave.id

    async def test_review_notifies_owner_and_only_once(self, session, company_employee, company_manager):
        service = LeaveRequestService(session)
        leave = await service.create_leave_request(
            LeaveRequestCreate(user_id=company_employee.id, leave_type="Annual", leave_date=date(2026, 3, 4))
        )

        reviewed = await service.review_leave_request(
            leave.id, LeaveRequestReview(status=LeaveStatus.REJECTED), current_user_id=company_manager.id
        )
        assert reviewed.status == LeaveStatus.REJECTED
        assert reviewed.reviewed_by == company_manager.id
        assert reviewed.reviewed_at is not None

        inbox = await NotificationService(session).get_user_notifications(company_employee.id)
        assert [n.category for n in inbox] == [NotificationCategory.LEAVE_REVIEW]

        with pytest.raises(InvalidStateTransitionError):
            await service.review_leave_request(leave.id, LeaveRequestReview(status=LeaveStatus.APPROVED))

    async def test_review_rejects_unknown_reviewer(self, session, employee):
        service = LeaveRequestService(session)
        leave = await service.create_leave_request(
            LeaveRequestCreate(user_id=employee.id, leave_type="Annual", leave_date=date(2026, 3, 4))
        )
        with pytest.raises(ValidationError) as exc_info:
            await service.review_leave_request(leave.id, LeaveRequestReview(status=LeaveStatus.APPROVED, reviewed_by=999))
        assert "reviewed_by" in exc_info.value.errors

        assert (await service.get_leave_request(leave.id)).status == LeaveStatus.PENDING

    async def test_review_cannot_set_pending(self):
        with pytest.raises(PydanticValidationError):
            LeaveRequestReview(status=LeaveStatus.PENDING)

    async def test_unknown_owner(self, session):
        with pytest.raises(NotFoundError):
            await LeaveRequestService(session).create_leave_request(
                LeaveRequestCreate(user_id=999, leave_type="Annual", leave_date=date(2026, 3, 4))
            )

    async def test_approved_queries_and_delete(self, session, employee):
        service = LeaveRequestService(session)
        first = await approved_leave(session, employee, date(2026, 3, 3))
        await approved_leave(session, employee, date(2026, 3, 20))
        await service.create_leave_request(LeaveRequestCreate(user_id=employee.id, leave_type="Annual", leave_date=date(2026, 3, 5)))

        leaves = await service.get_approved_leaves(employee.id, date(2026, 3, 1), date(2026, 3, 10))
        assert [leave.leave_date for leave in leaves] == [date(2026, 3, 3)]
        assert await service.count_approved(employee.id, date(2026, 3, 1), date(2026, 3, 31)) == 2

        page = await service.get_leave_requests(user_id=employee.id, leave_status=LeaveStatus.APPROVED)
        assert page["count"] == 2

        await service.delete_leave_request(first.id, employee.id)
        assert await service.count_approved(employee.id, date(2026, 3, 1), date(2026, 3, 31)) == 1
        with pytest.raises(NotFoundError):
            await service.get_leave_request(first.id)

        with pytest.raises(ValidationError):
            await service.count_approved(employee.id, date(2026, 3, 31), date(2026, 3, 1))


@pytest.mark.asyncio
class TestAttendanceCalendar:
    # Monday 2 March to Sunday 8 March 2026, viewed on Thursday at noon
    start = date(2026, 3, 2)
    end = date(2026, 3, 8)
    now = datetime(2026, 3, 5, 12, 0)

    async def test_week_classification_and_hours(self, session, employee):
        await ShiftService(session).create_shift(ShiftCreate(
            user_id=employee.id,
            start_time=datetime(2026, 3, 2, 9),
            end_time=datetime(2026, 3, 2, 17),
            total_break_seconds=1800,
        ))
        await approved_leave(session, employee, date(2026, 3, 3))
        # Weekend leave is excused but does not reduce required hours
        await approved_leave(session, employee, date(2026, 3, 7))

        calendar = await AttendanceService(session).get_calendar(employee.id, self.start, self.end, now=self.now)

        days = calendar.days
        assert days[date(2026, 3, 2)].status == AttendanceDayStatus.PRESENT
        assert len(days[date(2026, 3, 2)].shifts) == 1
        assert days[date(2026, 3, 3)].status == AttendanceDayStatus.EXCUSED_ABSENCE
        assert days[date(2026, 3, 3)].leave.leave_type == "Annual"
        assert days[date(2026, 3, 4)].status == AttendanceDayStatus.UNEXCUSED_ABSENCE
        assert days[date(2026, 3, 5)].status == AttendanceDayStatus.FUTURE
        assert days[date(2026, 3, 7)].status == AttendanceDayStatus.EXCUSED_ABSENCE

        assert calendar.working_days == 5
        assert calendar.approved_leave_days == 1
        assert calendar.default_shift_hours == 8
        assert calendar.required_hours == 32
        assert calendar.actual_hours == 7.5
        assert calendar.totals["future"] == 3

    async def test_pending_leave_is_not_excused(self, session, employee):
        await LeaveRequestService(session).create_leave_request(
            LeaveRequestCreate(user_id=employee.id, leave_type="Annual", leave_date=date(2026, 3, 3))
        )
        calendar = await AttendanceService(session).get_calendar(employee.id, self.start, self.end, now=self.now)
        assert calendar.days[date(2026, 3, 3)].status == AttendanceDayStatus.UNEXCUSED_ABSENCE
        assert calendar.approved_leave_days == 0

    async def test_company_weekend_days(self, session, company, company_employee):
        company.settings = {"shiftSettings": {"weekendDays": [4, 5], "defaultShiftHours": 6}}
        await session.commit()

        calendar = await AttendanceService(session).get_month_calendar(company_employee.id, "2026-02", now=self.now)
        # February 2026 has four Fridays and four Saturdays
        assert calendar.working_days == 20
        assert calendar.required_hours == 120
        assert calendar.start_date == date(2026, 2, 1)
        assert calendar.end_date == date(2026, 2, 28)

    async def test_invalid_range(self, session, employee):
        with pytest.raises(ValidationError):
            await AttendanceService(session).get_calendar(employee.id, self.end, self.start)
