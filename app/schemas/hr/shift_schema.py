from pydantic import BaseModel, Field, ValidationInfo, field_validator
from typing import List, Literal, Optional
from datetime import datetime

from app.models.shared.enums import ShiftState
from app.utils.date_time_utils import to_naive_utc

class ShiftBase(BaseModel):
    user_id: int
    start_time: datetime
    end_time: Optional[datetime] = None
    total_break_seconds: int = Field(0, ge=0)
    notes: Optional[str] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_times(cls, v):
        return to_naive_utc(v) if v is not None else v

class ShiftCreate(ShiftBase):
    @field_validator("end_time")
    @classmethod
    def validate_times(cls, v, info: ValidationInfo):
        start = info.data.get("start_time")
        if v is not None and start is not None and v <= start:
            raise ValueError("end_time must be after start_time")
        return v

class ShiftUpdate(BaseModel):
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    total_break_seconds: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_times(cls, v):
        return to_naive_utc(v) if v is not None else v

class ShiftStartRequest(BaseModel):
    user_id: int
    notes: Optional[str] = None

class BreakStartRequest(BaseModel):
    shift_id: int
    user_id: Optional[int] = None

class BreakResponse(BaseModel):
    id: int
    shift_id: int
    start_time: datetime
    end_time: Optional[datetime] = None
    notes: Optional[str] = None

    class Config:
        from_attributes = True

class ShiftResponse(BaseModel):
    id: int
    user_id: int
    start_time: datetime
    end_time: Optional[datetime] = None
    total_break_seconds: int
    notes: Optional[str] = None
    state: ShiftState
    net_work_seconds: int
    total_hours: float
    breaks: List[BreakResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class ActiveShiftResponse(BaseModel):
    state: ShiftState
    shift: Optional[ShiftResponse] = None

class MonthStatsResponse(BaseModel):
    user_id: int
    month: str
    total_seconds: int
    total_hours: float
    shifts: List[ShiftResponse]

class ShiftReportItem(BaseModel):
    id: int
    user_id: int
    user_name: str
    user_email: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    status: Literal["active", "completed"]
    break_duration: int  # minutes
    total_break_seconds: int
    total_hours: float
    notes: Optional[str] = None
