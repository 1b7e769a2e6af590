from pydantic import BaseModel, Field, validator
from typing import Optional
from datetime import date as DateType, datetime

from app.models.shared.enums import LeaveStatus

class LeaveRequestBase(BaseModel):
    leave_type: str = Field(..., min_length=1, max_length=255)
    leave_date: DateType
    notes: Optional[str] = Field(None, max_length=1000)

class LeaveRequestCreate(LeaveRequestBase):
    user_id: int

    @validator('leave_type')
    def validate_leave_type(cls, v):
        if not v.strip():
            raise ValueError('Leave type is required')
        return v.strip()

class LeaveRequestReview(BaseModel):
    status: LeaveStatus
    reviewed_by: Optional[int] = None

    @validator('status')
    def validate_status(cls, v):
        if v == LeaveStatus.PENDING:
            raise ValueError('A review must approve or reject the request')
        return v

class UserInfo(BaseModel):
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True

class LeaveRequestResponse(LeaveRequestBase):
    id: int
    user_id: int
    status: LeaveStatus
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    user: Optional[UserInfo] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ApprovedLeaveItem(BaseModel):
    id: int
    leave_date: DateType
    leave_type: str
    status: LeaveStatus

    class Config:
        from_attributes = True
