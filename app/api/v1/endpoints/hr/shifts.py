from datetime import date
from fastapi import APIRouter, Depends, Query, status
from typing import List, Literal, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_current_user_id, resolve_user_id
from app.core.database import get_async_session
from app.schemas.common.pagination import PaginatedResponse
from app.schemas.common.response import ApiResponse, CountResponse
from app.schemas.hr.shift_schema import (
    ActiveShiftResponse, MonthStatsResponse, ShiftCreate, ShiftReportItem,
    ShiftResponse, ShiftStartRequest, ShiftUpdate
)
from app.services.hr.shift_service import ShiftService

router = APIRouter()

# region Shift Records

@router.post("", response_model=ApiResponse[ShiftResponse], status_code=status.HTTP_201_CREATED)
async def create_shift(
    shift: ShiftCreate,
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    """Record a shift directly"""
    service = ShiftService(session)
    data = await service.create_shift(shift, current_user_id)
    return ApiResponse(message="Shift created successfully", data=data)

@router.get("", response_model=ApiResponse[PaginatedResponse[ShiftResponse]])
async def get_shifts(
    user_id: Optional[int] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    page_index: int = Query(1, ge=1),
    page_size: int = Query(100, ge=1, le=1000),
    session: AsyncSession = Depends(get_async_session)
):
    """Get shifts with pagination, filtered by user and start day"""
    service = ShiftService(session)
    data = await service.list_shifts(
        user_id=user_id,
        start_date=start_date,
        end_date=end_date,
        page_index=page_index,
        page_size=page_size
    )
    return ApiResponse(data=data)

@router.get("/report", response_model=ApiResponse[List[ShiftReportItem]])
async def get_shifts_report(
    start_date: date = Query(...),
    end_date: date = Query(...),
    user_id: Optional[int] = Query(None),
    order_by: Literal["start_time", "end_time", "created_at", "user_id"] = Query("start_time"),
    order_direction: Literal["asc", "desc"] = Query("desc"),
    session: AsyncSession = Depends(get_async_session)
):
    """Shifts of all users between two days"""
    service = ShiftService(session)
    data = await service.get_shifts_report(start_date, end_date, user_id, order_by, order_direction)
    return ApiResponse(data=data)

@router.get("/active", response_model=ApiResponse[ActiveShiftResponse])
async def get_active_shift(
    user_id: Optional[int] = Query(None),
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    """Current state and open shift of a user"""
    service = ShiftService(session)
    data = await service.get_active_shift(resolve_user_id(user_id, current_user_id))
    return ApiResponse(data=data)

@router.get("/count-today", response_model=ApiResponse[CountResponse])
async def count_today(
    user_id: Optional[int] = Query(None),
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    service = ShiftService(session)
    count = await service.count_today(resolve_user_id(user_id, current_user_id))
    return ApiResponse(data=CountResponse(count=count))

@router.get("/month/{month}", response_model=ApiResponse[MonthStatsResponse])
async def get_month_stats(
    month: str,
    user_id: Optional[int] = Query(None),
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    """Net hours of completed shifts in a YYYY-MM month"""
    service = ShiftService(session)
    data = await service.get_month_stats(resolve_user_id(user_id, current_user_id), month)
    return ApiResponse(data=data)

# endregion

# region Lifecycle Actions

@router.post("/start", response_model=ApiResponse[ShiftResponse], status_code=status.HTTP_201_CREATED)
async def start_shift(
    request: ShiftStartRequest,
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    service = ShiftService(session)
    data = await service.start_shift(request, current_user_id)
    return ApiResponse(message="Shift started", data=data)

@router.put("/end/{shift_id}", response_model=ApiResponse[ShiftResponse])
async def end_shift(
    shift_id: int,
    user_id: Optional[int] = Query(None),
    session: AsyncSession = Depends(get_async_session)
):
    """End a shift, closing any open break"""
    service = ShiftService(session)
    data = await service.end_shift(shift_id, user_id)
    return ApiResponse(message="Shift ended", data=data)

# endregion

@router.get("/{shift_id}", response_model=ApiResponse[ShiftResponse])
async def get_shift(
    shift_id: int,
    session: AsyncSession = Depends(get_async_session)
):
    service = ShiftService(session)
    return ApiResponse(data=await service.get_shift(shift_id))

@router.put("/{shift_id}", response_model=ApiResponse[ShiftResponse])
async def update_shift(
    shift_id: int,
    shift: ShiftUpdate,
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    service = ShiftService(session)
    data = await service.update_shift(shift_id, shift, current_user_id)
    return ApiResponse(message="Shift updated successfully", data=data)

@router.delete("/{shift_id}", response_model=ApiResponse)
async def delete_shift(
    shift_id: int,
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    service = ShiftService(session)
    await service.delete_shift(shift_id, current_user_id)
    return ApiResponse(message="Shift deleted successfully")
