from datetime import date
from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_current_user_id, resolve_user_id
from app.core.database import get_async_session
from app.models.shared.enums import LeaveStatus
from app.schemas.common.pagination import PaginatedResponse
from app.schemas.common.response import ApiResponse, CountResponse
from app.schemas.hr.leave_request_schema import (
    ApprovedLeaveItem, LeaveRequestCreate, LeaveRequestResponse, LeaveRequestReview
)
from app.services.hr.leave_request_service import LeaveRequestService

router = APIRouter()

@router.get("/leave-requests", response_model=ApiResponse[PaginatedResponse[LeaveRequestResponse]])
async def get_leave_requests(
    user_id: Optional[int] = Query(None),
    leave_status: Optional[LeaveStatus] = Query(None, alias="status"),
    page_index: int = Query(1, ge=1),
    page_size: int = Query(100, ge=1, le=1000),
    session: AsyncSession = Depends(get_async_session)
):
    """Get leave requests with pagination"""
    service = LeaveRequestService(session)
    data = await service.get_leave_requests(user_id, leave_status, page_index, page_size)
    return ApiResponse(data=data)

@router.post("/leave-requests", response_model=ApiResponse[LeaveRequestResponse], status_code=status.HTTP_201_CREATED)
async def create_leave_request(
    leave_request: LeaveRequestCreate,
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    service = LeaveRequestService(session)
    data = await service.create_leave_request(leave_request, current_user_id)
    return ApiResponse(message="Leave request created successfully", data=data)

@router.get("/leave-requests/count-approved", response_model=ApiResponse[CountResponse])
async def count_approved_leaves(
    start: date = Query(...),
    end: date = Query(...),
    user_id: Optional[int] = Query(None),
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    service = LeaveRequestService(session)
    count = await service.count_approved(resolve_user_id(user_id, current_user_id), start, end)
    return ApiResponse(data=CountResponse(count=count))

@router.get("/leave-requests/{leave_request_id}", response_model=ApiResponse[LeaveRequestResponse])
async def get_leave_request(
    leave_request_id: int,
    session: AsyncSession = Depends(get_async_session)
):
    service = LeaveRequestService(session)
    return ApiResponse(data=await service.get_leave_request(leave_request_id))

@router.put("/leave-requests/{leave_request_id}", response_model=ApiResponse[LeaveRequestResponse])
async def review_leave_request(
    leave_request_id: int,
    review: LeaveRequestReview,
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    """Approve or reject a pending leave request"""
    service = LeaveRequestService(session)
    data = await service.review_leave_request(leave_request_id, review, current_user_id)
    return ApiResponse(message="Leave request updated successfully", data=data)

@router.delete("/leave-requests/{leave_request_id}", response_model=ApiResponse)
async def delete_leave_request(
    leave_request_id: int,
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    service = LeaveRequestService(session)
    await service.delete_leave_request(leave_request_id, current_user_id)
    return ApiResponse(message="Leave request deleted successfully")

@router.get("/get_leaves", response_model=ApiResponse[List[ApprovedLeaveItem]])
async def get_approved_leaves(
    start_date: date = Query(...),
    end_date: date = Query(...),
    user_id: Optional[int] = Query(None),
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    """Approved leaves of a user within a date range"""
    service = LeaveRequestService(session)
    leaves = await service.get_approved_leaves(resolve_user_id(user_id, current_user_id), start_date, end_date)
    return ApiResponse(data=[ApprovedLeaveItem.model_validate(leave) for leave in leaves])
