from pydantic import BaseModel
from typing import Dict, List, Optional
from datetime import date

from app.models.shared.enums import AttendanceDayStatus
from app.schemas.hr.shift_schema import ShiftResponse
from app.schemas.hr.leave_request_schema import ApprovedLeaveItem

class AttendanceDay(BaseModel):
    status: AttendanceDayStatus
    shifts: List[ShiftResponse] = []
    leave: Optional[ApprovedLeaveItem] = None

class AttendanceCalendarResponse(BaseModel):
    user_id: int
    start_date: date
    end_date: date
    days: Dict[date, AttendanceDay]
    totals: Dict[str, int]
    working_days: int
    approved_leave_days: int
    default_shift_hours: int
    required_hours: float
    actual_hours: float
