import logging
from typing import Any, Dict, List, Optional
from datetime import date, datetime
from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from app.core.exceptions import InvalidStateTransitionError, NotFoundError, ValidationError
from app.models.hr.shift import Shift
from app.models.hr.shift_break import Break
from app.models.shared.enums import ShiftState
from app.schemas.hr.shift_schema import (
    ActiveShiftResponse, BreakResponse, BreakStartRequest, MonthStatsResponse,
    ShiftCreate, ShiftReportItem, ShiftResponse, ShiftStartRequest, ShiftUpdate
)
from app.schemas.organization.company_schema import ShiftSettings
from app.services.auth.user_service import UserService
from app.services.hr.time_accounting import (
    elapsed_seconds, net_work_seconds, seconds_to_hours, shift_state, total_net_work_seconds
)
from app.services.organization.company_service import CompanyService
from app.utils.date_time_utils import day_bounds, end_of_day, month_bounds, utc_now

logger = logging.getLogger(__name__)

REPORT_ORDER_FIELDS = {
    "start_time": Shift.start_time,
    "end_time": Shift.end_time,
    "created_at": Shift.created_at,
    "user_id": Shift.user_id,
}


def build_shift_response(shift: Shift, now: Optional[datetime] = None) -> ShiftResponse:
    seconds = net_work_seconds(shift.start_time, shift.end_time, shift.total_break_seconds, now or utc_now())
    return ShiftResponse(
        id=shift.id,
        user_id=shift.user_id,
        start_time=shift.start_time,
        end_time=shift.end_time,
        total_break_seconds=shift.total_break_seconds or 0,
        notes=shift.notes,
        state=shift_state(shift),
        net_work_seconds=seconds,
        total_hours=seconds_to_hours(seconds, 2),
        breaks=[BreakResponse.model_validate(b) for b in shift.breaks if not b.is_deleted],
        created_at=shift.created_at,
        updated_at=shift.updated_at,
    )


class ShiftService:
    """
    Shift and break lifecycle.

    A user's state is derived from rows: no open shift means ``not_started``,
    an open shift with an open break means ``on_break``, an open shift
    without one means ``active``. Actions attempted from any other state
    raise ``InvalidStateTransitionError``. Every action accepts an explicit
    ``at`` timestamp (naive UTC) and defaults to the current time.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_service = UserService(session)
        self.company_service = CompanyService(session)

    # region Queries

    def _shift_query(self):
        return (
            select(Shift)
            .options(selectinload(Shift.breaks))
            .where(Shift.is_deleted == False)
        )

    async def _load_shift(self, shift_id: int) -> Optional[Shift]:
        result = await self.session.execute(
            self._shift_query()
            .where(Shift.id == shift_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _get_shift_or_404(self, shift_id: int) -> Shift:
        shift = await self._load_shift(shift_id)
        if shift is None:
            raise NotFoundError(f"Shift {shift_id} not found")
        return shift

    async def _get_open_shift(self, user_id: int) -> Optional[Shift]:
        result = await self.session.execute(
            self._shift_query()
            .where(Shift.user_id == user_id, Shift.end_time.is_(None))
            .order_by(Shift.start_time.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def _get_break_or_404(self, break_id: int) -> Break:
        result = await self.session.execute(
            select(Break).where(Break.id == break_id, Break.is_deleted == False)
        )
        shift_break = result.scalar_one_or_none()
        if shift_break is None:
            raise NotFoundError(f"Break {break_id} not found")
        return shift_break

    @staticmethod
    def _check_owner(shift: Shift, user_id: Optional[int]) -> None:
        if user_id is not None and shift.user_id != user_id:
            raise ValidationError.for_field("user_id", "Shift does not belong to this user")

    async def get_shift(self, shift_id: int) -> ShiftResponse:
        shift = await self._get_shift_or_404(shift_id)
        return build_shift_response(shift)

    async def get_active_shift(self, user_id: int, at: Optional[datetime] = None) -> ActiveShiftResponse:
        """Open shift of a user with its breaks, or ``not_started``"""
        await self.user_service.get_user_or_404(user_id)
        shift = await self._get_open_shift(user_id)
        if shift is None:
            return ActiveShiftResponse(state=ShiftState.NOT_STARTED, shift=None)
        return ActiveShiftResponse(state=shift_state(shift), shift=build_shift_response(shift, at))

    async def count_today(self, user_id: int, at: Optional[datetime] = None) -> int:
        """Non-deleted shifts whose start falls on the current day"""
        day_start, day_end = day_bounds((at or utc_now()).date())
        count = await self.session.scalar(
            select(func.count(Shift.id)).where(
                Shift.user_id == user_id,
                Shift.is_deleted == False,
                Shift.start_time >= day_start,
                Shift.start_time < day_end,
            )
        )
        return count or 0

    async def list_shifts(
        self,
        user_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        page_index: int = 1,
        page_size: int = 100
    ) -> Dict[str, Any]:
        """Get paginated shifts, optionally for one user and a start-day range"""
        if start_date and end_date and end_date < start_date:
            raise ValidationError.for_field("end_date", "end_date must be on or after start_date")

        conditions = [Shift.is_deleted == False]
        if user_id is not None:
            conditions.append(Shift.user_id == user_id)
        if start_date is not None:
            conditions.append(Shift.start_time >= day_bounds(start_date)[0])
        if end_date is not None:
            conditions.append(Shift.start_time < day_bounds(end_date)[1])

        total_count = await self.session.scalar(select(func.count(Shift.id)).where(*conditions))

        skip = (page_index - 1) * page_size
        result = await self.session.execute(
            select(Shift)
            .options(selectinload(Shift.breaks))
            .where(*conditions)
            .order_by(Shift.start_time)
            .offset(skip)
            .limit(page_size)
        )
        now = utc_now()

        return {
            "page_index": page_index,
            "page_size": page_size,
            "count": total_count or 0,
            "data": [build_shift_response(s, now) for s in result.scalars().all()]
        }

    async def get_shifts_in_range(self, user_id: int, start_date: date, end_date: date) -> List[Shift]:
        """All of a user's shifts starting within [start_date, end_date], oldest first"""
        result = await self.session.execute(
            self._shift_query()
            .where(
                Shift.user_id == user_id,
                Shift.start_time >= day_bounds(start_date)[0],
                Shift.start_time < day_bounds(end_date)[1],
            )
            .order_by(Shift.start_time)
        )
        return list(result.scalars().all())

    async def get_month_stats(self, user_id: int, month: str, at: Optional[datetime] = None) -> MonthStatsResponse:
        """Net hours of the user's completed shifts in a ``YYYY-MM`` month"""
        try:
            first_day, last_day = month_bounds(month)
        except ValueError as e:
            raise ValidationError.for_field("month", str(e))

        await self.user_service.get_user_or_404(user_id)
        shifts = [
            s for s in await self.get_shifts_in_range(user_id, first_day, last_day)
            if s.end_time is not None
        ]
        now = at or utc_now()
        total_seconds = total_net_work_seconds(shifts, now)

        return MonthStatsResponse(
            user_id=user_id,
            month=first_day.strftime("%Y-%m"),
            total_seconds=total_seconds,
            total_hours=seconds_to_hours(total_seconds, 2),
            shifts=[build_shift_response(s, now) for s in shifts],
        )

    async def get_shifts_report(
        self,
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
        order_by: str = "start_time",
        order_direction: str = "desc"
    ) -> List[ShiftReportItem]:
        """Shifts across users between two days, with user details"""
        if end_date < start_date:
            raise ValidationError.for_field("end_date", "end_date must be on or after start_date")
        if order_by not in REPORT_ORDER_FIELDS:
            raise ValidationError.for_field("order_by", f"order_by must be one of {', '.join(REPORT_ORDER_FIELDS)}")

        column = REPORT_ORDER_FIELDS[order_by]
        conditions = [
            Shift.is_deleted == False,
            Shift.start_time >= day_bounds(start_date)[0],
            Shift.start_time < day_bounds(end_date)[1],
        ]
        if user_id is not None:
            await self.user_service.get_user_or_404(user_id)
            conditions.append(Shift.user_id == user_id)

        result = await self.session.execute(
            select(Shift)
            .options(selectinload(Shift.user))
            .where(*conditions)
            .order_by(column.asc() if order_direction == "asc" else column.desc(), Shift.id)
        )
        shifts = result.scalars().all()
        logger.info(f"Shift report {start_date}..{end_date}: {len(shifts)} shifts")

        items = []
        for shift in shifts:
            break_seconds = shift.total_break_seconds or 0
            total_hours = 0.0
            if shift.end_time is not None:
                total_hours = seconds_to_hours(
                    net_work_seconds(shift.start_time, shift.end_time, break_seconds, shift.end_time), 2
                )
            items.append(ShiftReportItem(
                id=shift.id,
                user_id=shift.user_id,
                user_name=shift.user.name if shift.user else "Unknown",
                user_email=shift.user.email if shift.user else None,
                start_time=shift.start_time,
                end_time=shift.end_time,
                status="completed" if shift.end_time else "active",
                break_duration=round(break_seconds / 60),
                total_break_seconds=break_seconds,
                total_hours=total_hours,
                notes=shift.notes,
            ))
        return items

    # endregion

    # region Lifecycle Actions

    async def start_shift(
        self,
        data: ShiftStartRequest,
        current_user_id: Optional[int] = None,
        at: Optional[datetime] = None
    ) -> ShiftResponse:
        now = at or utc_now()
        try:
            user = await self.user_service.get_user_or_404(data.user_id)

            if await self._get_open_shift(user.id) is not None:
                raise InvalidStateTransitionError("User already has an active shift")

            shift_settings = await self.company_service.get_shift_settings(user)
            started_today = await self.count_today(user.id, now)
            if started_today >= shift_settings.shifts_per_day:
                raise InvalidStateTransitionError(
                    f"Daily shift limit reached ({shift_settings.shifts_per_day} per day)"
                )

            shift = Shift(
                user_id=user.id,
                start_time=now,
                total_break_seconds=0,
                notes=data.notes,
                created_by=current_user_id or user.id,
            )
            self.session.add(shift)
            await self.session.commit()

            logger.info(f"Shift {shift.id} started for user {user.id}")
            return build_shift_response(await self._get_shift_or_404(shift.id), now)

        except HTTPException:
            raise
        except IntegrityError:
            # Concurrent start lost the race on uq_shifts_user_open
            await self.session.rollback()
            raise InvalidStateTransitionError("User already has an active shift")
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error starting shift for user {data.user_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error starting shift")

    async def start_break(self, data: BreakStartRequest, at: Optional[datetime] = None) -> ShiftResponse:
        now = at or utc_now()
        try:
            shift = await self._get_shift_or_404(data.shift_id)
            self._check_owner(shift, data.user_id)

            state = shift_state(shift)
            if state != ShiftState.ACTIVE:
                raise InvalidStateTransitionError(f"Cannot start a break while the shift is {state.value}")

            shift_break = Break(shift_id=shift.id, start_time=max(now, shift.start_time))
            self.session.add(shift_break)
            await self.session.commit()

            logger.info(f"Break {shift_break.id} started on shift {shift.id}")
            return build_shift_response(await self._get_shift_or_404(shift.id), now)

        except HTTPException:
            raise
        except IntegrityError:
            await self.session.rollback()
            raise InvalidStateTransitionError("Shift already has an open break")
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error starting break on shift {data.shift_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error starting break")

    async def end_break(
        self,
        break_id: int,
        user_id: Optional[int] = None,
        at: Optional[datetime] = None
    ) -> ShiftResponse:
        now = at or utc_now()
        try:
            shift_break = await self._get_break_or_404(break_id)
            shift = await self._get_shift_or_404(shift_break.shift_id)
            self._check_owner(shift, user_id)

            if shift.end_time is not None or shift_break.end_time is not None:
                raise InvalidStateTransitionError("Break is not in progress")

            self._close_break(shift, shift_break, now)
            await self.session.commit()

            logger.info(f"Break {shift_break.id} ended on shift {shift.id} ({shift.total_break_seconds}s total)")
            return build_shift_response(await self._get_shift_or_404(shift.id), now)

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error ending break {break_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error ending break")

    async def end_shift(
        self,
        shift_id: int,
        user_id: Optional[int] = None,
        at: Optional[datetime] = None
    ) -> ShiftResponse:
        now = at or utc_now()
        try:
            shift = await self._get_shift_or_404(shift_id)
            self._check_owner(shift, user_id)

            if shift.end_time is not None:
                raise InvalidStateTransitionError("Shift has already ended")

            self._close_shift(shift, now)
            await self.session.commit()

            logger.info(f"Shift {shift.id} ended for user {shift.user_id}")
            return build_shift_response(await self._get_shift_or_404(shift.id), now)

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error ending shift {shift_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error ending shift")

    @staticmethod
    def _close_break(shift: Shift, shift_break: Break, at: datetime) -> None:
        end = max(at, shift_break.start_time)
        shift_break.end_time = end
        shift.total_break_seconds = (shift.total_break_seconds or 0) + elapsed_seconds(shift_break.start_time, end)

    def _close_shift(self, shift: Shift, at: datetime) -> None:
        """
        End the shift at ``at``, closing an open break at the same instant.

        An open break that starts after ``at`` lies outside the shift and is
        discarded instead of being closed.
        """
        end = max(at, shift.start_time)
        open_break = shift.open_break
        if open_break is not None:
            if open_break.start_time > end:
                open_break.soft_delete(at=end)
            else:
                self._close_break(shift, open_break, end)
        shift.end_time = end

    @staticmethod
    def _check_breaks_within(shift: Shift, start_time: datetime, end_time: Optional[datetime]) -> None:
        """Every live break must lie inside [start_time, end_time]"""
        for shift_break in shift.breaks:
            if shift_break.is_deleted:
                continue
            if shift_break.start_time < start_time:
                raise ValidationError.for_field("start_time", "start_time must not be after a break starts")
            if end_time is not None and (shift_break.end_time or shift_break.start_time) > end_time:
                raise ValidationError.for_field("end_time", "end_time must not be before a break ends")

    async def auto_end_open_shifts(self, at: Optional[datetime] = None) -> int:
        """
        End shifts left open past their start day.

        Applies to users whose company has ``autoEndShift`` enabled; each
        shift ends at 23:59:59 of the day it started. Returns how many
        shifts were closed.
        """
        now = at or utc_now()
        today_start, _ = day_bounds(now.date())
        try:
            result = await self.session.execute(
                self._shift_query()
                .options(selectinload(Shift.user))
                .where(Shift.end_time.is_(None), Shift.start_time < today_start)
                .order_by(Shift.start_time)
            )
            shifts = result.scalars().all()

            settings_by_company: Dict[Optional[int], ShiftSettings] = {}
            ended = 0
            for shift in shifts:
                company_id = shift.user.company_id
                if company_id not in settings_by_company:
                    settings_by_company[company_id] = await self.company_service.get_shift_settings(shift.user)
                if not settings_by_company[company_id].auto_end_shift:
                    continue

                self._close_shift(shift, end_of_day(shift.start_time.date()))
                ended += 1
                logger.info(f"Shift {shift.id} of user {shift.user_id} auto-ended at {shift.end_time}")

            await self.session.commit()
            return ended

        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error auto-ending open shifts: {e}")
            raise

    # endregion

    # region Record Management

    async def create_shift(self, data: ShiftCreate, current_user_id: Optional[int] = None) -> ShiftResponse:
        """Record a shift directly (manual entry); an open record obeys the single-open rule"""
        try:
            user = await self.user_service.get_user_or_404(data.user_id)

            if data.end_time is None and await self._get_open_shift(user.id) is not None:
                raise InvalidStateTransitionError("User already has an active shift")

            shift = Shift(
                user_id=user.id,
                start_time=data.start_time,
                end_time=data.end_time,
                total_break_seconds=data.total_break_seconds,
                notes=data.notes,
                created_by=current_user_id,
            )
            self.session.add(shift)
            await self.session.commit()

            logger.info(f"Shift record {shift.id} created for user {user.id} by user {current_user_id}")
            return build_shift_response(await self._get_shift_or_404(shift.id))

        except HTTPException:
            raise
        except IntegrityError:
            await self.session.rollback()
            raise InvalidStateTransitionError("User already has an active shift")
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error creating shift record: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error creating shift")

    async def update_shift(
        self,
        shift_id: int,
        data: ShiftUpdate,
        current_user_id: Optional[int] = None
    ) -> ShiftResponse:
        """Merge the supplied fields onto the shift, re-checking times on the result"""
        try:
            shift = await self._get_shift_or_404(shift_id)
            changes = data.model_dump(exclude_unset=True)

            for field in ("start_time", "total_break_seconds"):
                if field in changes and changes[field] is None:
                    raise ValidationError.for_field(field, f"{field} cannot be null")

            start_time = changes.get("start_time", shift.start_time)
            end_time = changes.get("end_time", shift.end_time)
            if end_time is not None and end_time <= start_time:
                raise ValidationError.for_field("end_time", "end_time must be after start_time")
            self._check_breaks_within(shift, start_time, end_time)

            ending = shift.end_time is None and end_time is not None
            for field, value in changes.items():
                if ending and field == "end_time":
                    continue
                setattr(shift, field, value)
            if ending:
                # Closes an open break at the new end_time
                self._close_shift(shift, end_time)
                if "total_break_seconds" in changes:
                    shift.total_break_seconds = changes["total_break_seconds"]
            shift.updated_by = current_user_id

            await self.session.commit()

            logger.info(f"Shift {shift.id} updated by user {current_user_id}")
            return build_shift_response(await self._get_shift_or_404(shift.id))

        except HTTPException:
            raise
        except IntegrityError:
            await self.session.rollback()
            raise InvalidStateTransitionError("User already has an active shift")
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error updating shift {shift_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error updating shift")

    async def delete_shift(self, shift_id: int, current_user_id: Optional[int] = None) -> bool:
        """Soft delete a shift together with its breaks"""
        try:
            shift = await self._get_shift_or_404(shift_id)
            now = utc_now()
            for shift_break in shift.breaks:
                if not shift_break.is_deleted:
                    shift_break.soft_delete(current_user_id, now)
            shift.soft_delete(current_user_id, now)

            await self.session.commit()
            logger.info(f"Shift {shift_id} deleted by user {current_user_id}")
            return True

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error deleting shift {shift_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error deleting shift")

    # endregion
