import pytest
from datetime import datetime
from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import InvalidStateTransitionError, NotFoundError, ValidationError
from app.models.hr.shift import Shift
from app.models.shared.enums import ShiftState
from app.schemas.hr.shift_schema import BreakStartRequest, ShiftCreate, ShiftStartRequest, ShiftUpdate
from app.services.hr.shift_service import ShiftService
from app.services.organization.company_service import CompanyService
from app.schemas.organization.company_schema import CompanySettingsUpdate
from app.workers.celery_tasks.shift_tasks import _auto_end_open_shifts


def at(hour, minute=0, day=2):
    """Timestamps on Monday 2 March 2026 unless another day is given"""
    return datetime(2026, 3, day, hour, minute)


@pytest.mark.asyncio
class TestShiftLifecycle:
    """Start, break and end actions"""

    async def test_full_day_with_one_break(self, session, employee):
        service = ShiftService(session)

        shift = await service.start_shift(ShiftStartRequest(user_id=employee.id), at=at(9))
        assert shift.state == ShiftState.ACTIVE
        assert shift.end_time is None

        on_break = await service.start_break(BreakStartRequest(shift_id=shift.id, user_id=employee.id), at=at(12))
        assert on_break.state == ShiftState.ON_BREAK
        break_id = on_break.breaks[0].id

        back = await service.end_break(break_id, employee.id, at=at(12, 30))
        assert back.state == ShiftState.ACTIVE
        assert back.total_break_seconds == 1800

        ended = await service.end_shift(shift.id, employee.id, at=at(17))
        assert ended.state == ShiftState.ENDED
        assert ended.end_time == at(17)
        assert ended.total_break_seconds == 1800
        assert ended.net_work_seconds == 27000
        assert ended.total_hours == 7.5

    async def test_break_seconds_accumulate(self, session, employee):
        service = ShiftService(session)
        shift = await service.start_shift(ShiftStartRequest(user_id=employee.id), at=at(9))

        first = await service.start_break(BreakStartRequest(shift_id=shift.id), at=at(10))
        await service.end_break(first.breaks[0].id, at=at(10, 15))
        second = await service.start_break(BreakStartRequest(shift_id=shift.id), at=at(13))
        result = await service.end_break(second.breaks[1].id, at=at(13, 45))

        assert result.total_break_seconds == 15 * 60 + 45 * 60
        assert len(result.breaks) == 2

    async def test_ending_shift_closes_open_break(self, session, employee):
        service = ShiftService(session)
        shift = await service.start_shift(ShiftStartRequest(user_id=employee.id), at=at(9))
        await service.start_break(BreakStartRequest(shift_id=shift.id), at=at(12))

        ended = await service.end_shift(shift.id, at=at(13))

        assert ended.state == ShiftState.ENDED
        assert ended.breaks[0].end_time == at(13)
        assert ended.total_break_seconds == 3600
        assert ended.net_work_seconds == 3 * 3600

    async def test_active_shift_state(self, session, employee):
        service = ShiftService(session)
        idle = await service.get_active_shift(employee.id)
        assert idle.state == ShiftState.NOT_STARTED
        assert idle.shift is None

        shift = await service.start_shift(ShiftStartRequest(user_id=employee.id), at=at(9))
        active = await service.get_active_shift(employee.id, at=at(10))
        assert active.state == ShiftState.ACTIVE
        assert active.shift.id == shift.id
        assert active.shift.net_work_seconds == 3600

    async def test_unknown_user_cannot_start(self, session):
        service = ShiftService(session)
        with pytest.raises(NotFoundError):
            await service.start_shift(ShiftStartRequest(user_id=999), at=at(9))


@pytest.mark.asyncio
class TestInvalidTransitions:
    async def test_only_one_open_shift(self, session, employee):
        service = ShiftService(session)
        await service.start_shift(ShiftStartRequest(user_id=employee.id), at=at(9))
        with pytest.raises(InvalidStateTransitionError):
            await service.start_shift(ShiftStartRequest(user_id=employee.id), at=at(10))

    async def test_daily_limit_blocks_second_shift(self, session, employee):
        service = ShiftService(session)
        shift = await service.start_shift(ShiftStartRequest(user_id=employee.id), at=at(9))
        await service.end_shift(shift.id, at=at(12))

        assert await service.count_today(employee.id, at(13)) == 1
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            await service.start_shift(ShiftStartRequest(user_id=employee.id), at=at(13))
        assert exc_info.value.status_code == 409

        # A new day resets the count
        next_day = await service.start_shift(ShiftStartRequest(user_id=employee.id), at=at(9, day=3))
        assert next_day.state == ShiftState.ACTIVE

    async def test_company_shift_limit_is_respected(self, session, company, company_employee):
        await CompanyService(session).update_settings(
            company.id, CompanySettingsUpdate.model_validate({"shiftSettings": {"shiftsPerDay": 2}})
        )
        service = ShiftService(session)
        first = await service.start_shift(ShiftStartRequest(user_id=company_employee.id), at=at(9))
        await service.end_shift(first.id, at=at(12))

        second = await service.start_shift(ShiftStartRequest(user_id=company_employee.id), at=at(13))
        await service.end_shift(second.id, at=at(17))

        with pytest.raises(InvalidStateTransitionError):
            await service.start_shift(ShiftStartRequest(user_id=company_employee.id), at=at(18))

    async def test_break_requires_active_shift(self, session, employee):
        service = ShiftService(session)
        shift = await service.start_shift(ShiftStartRequest(user_id=employee.id), at=at(9))
        await service.start_break(BreakStartRequest(shift_id=shift.id), at=at(10))

        with pytest.raises(InvalidStateTransitionError):
            await service.start_break(BreakStartRequest(shift_id=shift.id), at=at(10, 5))

        await service.end_shift(shift.id, at=at(11))
        with pytest.raises(InvalidStateTransitionError):
            await service.start_break(BreakStartRequest(shift_id=shift.id), at=at(11, 30))

    async def test_ended_break_and_shift_cannot_end_again(self, session, employee):
        service = ShiftService(session)
        shift = await service.start_shift(ShiftStartRequest(user_id=employee.id), at=at(9))
        on_break = await service.start_break(BreakStartRequest(shift_id=shift.id), at=at(10))
        await service.end_break(on_break.breaks[0].id, at=at(10, 10))

        with pytest.raises(InvalidStateTransitionError):
            await service.end_break(on_break.breaks[0].id, at=at(10, 20))

        await service.end_shift(shift.id, at=at(17))
        with pytest.raises(InvalidStateTransitionError):
            await service.end_shift(shift.id, at=at(18))

    async def test_actions_check_shift_owner(self, session, employee, company_employee):
        service = ShiftService(session)
        shift = await service.start_shift(ShiftStartRequest(user_id=employee.id), at=at(9))

        with pytest.raises(ValidationError) as exc_info:
            await service.end_shift(shift.id, company_employee.id, at=at(10))
        assert "user_id" in exc_info.value.errors

        with pytest.raises(ValidationError):
            await service.start_break(BreakStartRequest(shift_id=shift.id, user_id=company_employee.id), at=at(10))

    async def test_open_shift_index_rejects_concurrent_start(self, session, employee, monkeypatch):
        # Row written by another request after the open shift lookup ran
        session.add(Shift(user_id=employee.id, start_time=at(9, day=1), total_break_seconds=0))
        await session.commit()

        service = ShiftService(session)

        async def no_open_shift(user_id):
            return None

        monkeypatch.setattr(service, "_get_open_shift", no_open_shift)

        with pytest.raises(InvalidStateTransitionError) as exc_info:
            await service.start_shift(ShiftStartRequest(user_id=employee.id), at=at(9))
        assert exc_info.value.status_code == 409
        assert exc_info.value.detail == "User already has an active shift"

    async def test_open_break_index_rejects_concurrent_break(self, session, employee, monkeypatch):
        service = ShiftService(session)
        shift = await service.start_shift(ShiftStartRequest(user_id=employee.id), at=at(9))
        await service.start_break(BreakStartRequest(shift_id=shift.id), at=at(10))

        monkeypatch.setattr("app.services.hr.shift_service.shift_state", lambda shift: ShiftState.ACTIVE)

        with pytest.raises(InvalidStateTransitionError) as exc_info:
            await service.start_break(BreakStartRequest(shift_id=shift.id), at=at(10, 5))
        assert exc_info.value.detail == "Shift already has an open break"


@pytest.mark.asyncio
class TestShiftRecords:
    async def test_create_update_and_delete(self, session, employee):
        service = ShiftService(session)
        created = await service.create_shift(ShiftCreate(
            user_id=employee.id, start_time=at(8), end_time=at(16), total_break_seconds=600
        ), current_user_id=employee.id)
        assert created.state == ShiftState.ENDED
        assert created.net_work_seconds == 8 * 3600 - 600

        updated = await service.update_shift(created.id, ShiftUpdate(end_time=at(17), notes="Late flight desk"))
        assert updated.end_time == at(17)
        assert updated.notes == "Late flight desk"

        with pytest.raises(ValidationError) as exc_info:
            await service.update_shift(created.id, ShiftUpdate(end_time=at(7)))
        assert "end_time" in exc_info.value.errors

        await service.delete_shift(created.id, employee.id)
        with pytest.raises(NotFoundError):
            await service.get_shift(created.id)

    async def test_setting_end_time_closes_open_break(self, session, employee):
        service = ShiftService(session)
        shift = await service.start_shift(ShiftStartRequest(user_id=employee.id), at=at(9))
        await service.start_break(BreakStartRequest(shift_id=shift.id), at=at(12))

        updated = await service.update_shift(shift.id, ShiftUpdate(end_time=at(17)))

        assert updated.state == ShiftState.ENDED
        assert updated.breaks[0].end_time == at(17)
        assert updated.total_break_seconds == 5 * 3600
        assert updated.net_work_seconds == 3 * 3600

    async def test_times_must_enclose_breaks(self, session, employee):
        service = ShiftService(session)
        shift = await service.start_shift(ShiftStartRequest(user_id=employee.id), at=at(9))
        on_break = await service.start_break(BreakStartRequest(shift_id=shift.id), at=at(12))
        await service.end_break(on_break.breaks[0].id, at=at(12, 30))

        with pytest.raises(ValidationError) as exc_info:
            await service.update_shift(shift.id, ShiftUpdate(start_time=at(13)))
        assert "start_time" in exc_info.value.errors

        with pytest.raises(ValidationError) as exc_info:
            await service.update_shift(shift.id, ShiftUpdate(end_time=at(12, 15)))
        assert "end_time" in exc_info.value.errors

        unchanged = await service.get_shift(shift.id)
        assert unchanged.start_time == at(9)
        assert unchanged.end_time is None

    async def test_end_before_start_is_rejected_by_schema(self):
        with pytest.raises(PydanticValidationError):
            ShiftCreate(user_id=1, start_time=at(9), end_time=at(8))

    async def test_list_and_month_stats(self, session, employee):
        service = ShiftService(session)
        for day in (2, 3):
            await service.create_shift(ShiftCreate(
                user_id=employee.id, start_time=at(9, day=day), end_time=at(17, day=day), total_break_seconds=1800
            ))
        await service.start_shift(ShiftStartRequest(user_id=employee.id), at=at(9, day=4))

        listing = await service.list_shifts(user_id=employee.id)
        assert listing["count"] == 3

        stats = await service.get_month_stats(employee.id, "2026-03", at=at(12, day=4))
        assert stats.month == "2026-03"
        assert len(stats.shifts) == 2
        assert stats.total_seconds == 2 * 27000
        assert stats.total_hours == 15.0

        with pytest.raises(ValidationError):
            await service.get_month_stats(employee.id, "March")

    async def test_report_lists_users(self, session, employee, company_employee):
        service = ShiftService(session)
        await service.create_shift(ShiftCreate(user_id=employee.id, start_time=at(9), end_time=at(17), total_break_seconds=3600))
        await service.start_shift(ShiftStartRequest(user_id=company_employee.id), at=at(10))

        report = await service.get_shifts_report(at(0).date(), at(0).date(), order_direction="asc")
        assert [item.user_name for item in report] == ["Sara Agent", "Omar Agent"]
        assert report[0].status == "completed"
        assert report[0].break_duration == 60
        assert report[0].total_hours == 7.0
        assert report[1].status == "active"
        assert report[1].total_hours == 0.0


@pytest.mark.asyncio
class TestAutoEnd:
    async def test_closes_yesterdays_shift_and_leaves_today_open(self, session, employee, company_employee):
        service = ShiftService(session)
        stale = await service.start_shift(ShiftStartRequest(user_id=employee.id), at=at(9, day=2))
        await service.start_break(BreakStartRequest(shift_id=stale.id), at=at(20, day=2))
        today = await service.start_shift(ShiftStartRequest(user_id=company_employee.id), at=at(8, day=3))

        ended = await service.auto_end_open_shifts(at=at(10, day=3))
        assert ended == 1

        closed = await service.get_shift(stale.id)
        assert closed.end_time == datetime(2026, 3, 2, 23, 59, 59)
        assert closed.state == ShiftState.ENDED
        assert closed.breaks[0].end_time == datetime(2026, 3, 2, 23, 59, 59)

        still_open = await service.get_shift(today.id)
        assert still_open.end_time is None

    async def test_break_started_after_midnight_is_discarded(self, session, employee):
        service = ShiftService(session)
        shift = await service.start_shift(ShiftStartRequest(user_id=employee.id), at=at(22, day=2))
        await service.start_break(BreakStartRequest(shift_id=shift.id), at=at(0, 30, day=3))

        assert await service.auto_end_open_shifts(at=at(10, day=4)) == 1

        closed = await service.get_shift(shift.id)
        assert closed.end_time == datetime(2026, 3, 2, 23, 59, 59)
        assert closed.breaks == []
        assert closed.total_break_seconds == 0

    async def test_company_can_disable_auto_end(self, session, company, company_employee):
        await CompanyService(session).update_settings(
            company.id, CompanySettingsUpdate.model_validate({"shiftSettings": {"autoEndShift": False}})
        )
        service = ShiftService(session)
        shift = await service.start_shift(ShiftStartRequest(user_id=company_employee.id), at=at(9, day=2))

        assert await service.auto_end_open_shifts(at=at(10, day=3)) == 0
        assert (await service.get_shift(shift.id)).end_time is None

    async def test_worker_task_runs_with_its_own_session(self, session, session_factory, employee):
        service = ShiftService(session)
        shift = await service.start_shift(ShiftStartRequest(user_id=employee.id), at=datetime(2020, 1, 6, 9))

        assert await _auto_end_open_shifts(session_factory) == 1
        assert (await service.get_shift(shift.id)).end_time == datetime(2020, 1, 6, 23, 59, 59)
