from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_current_user_id, resolve_user_id
from app.core.database import get_async_session
from app.schemas.common.response import ApiResponse, CountResponse
from app.schemas.notification.notification_schema import NotificationResponse
from app.services.notification.notification_service import NotificationService

router = APIRouter()

@router.get("/user", response_model=ApiResponse[List[NotificationResponse]])
async def get_user_notifications(
    user_id: Optional[int] = Query(None),
    unread_only: bool = Query(False),
    limit: int = Query(50, ge=1, le=500),
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    """Recent notifications of a user, newest first"""
    service = NotificationService(session)
    notifications = await service.get_user_notifications(
        resolve_user_id(user_id, current_user_id), unread_only=unread_only, limit=limit
    )
    return ApiResponse(data=[NotificationResponse.model_validate(n) for n in notifications])

@router.get("/unread-count", response_model=ApiResponse[CountResponse])
async def get_unread_count(
    user_id: Optional[int] = Query(None),
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    service = NotificationService(session)
    count = await service.get_unread_count(resolve_user_id(user_id, current_user_id))
    return ApiResponse(data=CountResponse(count=count))

@router.post("/mark-all-read", response_model=ApiResponse[CountResponse])
async def mark_all_read(
    user_id: Optional[int] = Query(None),
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    service = NotificationService(session)
    count = await service.mark_all_read(resolve_user_id(user_id, current_user_id))
    return ApiResponse(message="All notifications marked as read", data=CountResponse(count=count))

@router.post("/{notification_id}/mark-read", response_model=ApiResponse[NotificationResponse])
async def mark_notification_read(
    notification_id: int,
    user_id: Optional[int] = Query(None),
    session: AsyncSession = Depends(get_async_session)
):
    service = NotificationService(session)
    notification = await service.mark_notification_read(notification_id, user_id)
    return ApiResponse(message="Notification marked as read", data=NotificationResponse.model_validate(notification))
