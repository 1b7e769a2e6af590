from datetime import date
from fastapi import APIRouter, Depends, Query
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_current_user_id, resolve_user_id
from app.core.database import get_async_session
from app.schemas.common.response import ApiResponse
from app.schemas.hr.attendance_schema import AttendanceCalendarResponse
from app.services.hr.attendance_service import AttendanceService

router = APIRouter()

@router.get("/calendar", response_model=ApiResponse[AttendanceCalendarResponse])
async def get_attendance_calendar(
    start_date: date = Query(...),
    end_date: date = Query(...),
    user_id: Optional[int] = Query(None),
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    """Per-day attendance status with required and actual hours"""
    service = AttendanceService(session)
    data = await service.get_calendar(resolve_user_id(user_id, current_user_id), start_date, end_date)
    return ApiResponse(data=data)

@router.get("/month/{month}", response_model=ApiResponse[AttendanceCalendarResponse])
async def get_month_attendance(
    month: str,
    user_id: Optional[int] = Query(None),
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    service = AttendanceService(session)
    data = await service.get_month_calendar(resolve_user_id(user_id, current_user_id), month)
    return ApiResponse(data=data)
