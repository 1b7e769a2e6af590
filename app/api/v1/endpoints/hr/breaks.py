from fastapi import APIRouter, Depends, Query, status
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_async_session
from app.schemas.common.response import ApiResponse
from app.schemas.hr.shift_schema import BreakStartRequest, ShiftResponse
from app.services.hr.shift_service import ShiftService

router = APIRouter()

@router.post("/start", response_model=ApiResponse[ShiftResponse], status_code=status.HTTP_201_CREATED)
async def start_break(
    request: BreakStartRequest,
    session: AsyncSession = Depends(get_async_session)
):
    """Start a break on an active shift; returns the updated shift"""
    service = ShiftService(session)
    data = await service.start_break(request)
    return ApiResponse(message="Break started", data=data)

@router.post("/{break_id}/end", response_model=ApiResponse[ShiftResponse])
async def end_break(
    break_id: int,
    user_id: Optional[int] = Query(None),
    session: AsyncSession = Depends(get_async_session)
):
    service = ShiftService(session)
    data = await service.end_break(break_id, user_id)
    return ApiResponse(message="Break ended", data=data)
