from fastapi import APIRouter, Body, Depends, Query, status
from typing import Any, Dict, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_current_user_id
from app.core.database import get_async_session
from app.models.shared.enums import ReservableType, ReservationStatus
from app.schemas.common.pagination import PaginatedResponse
from app.schemas.common.response import ApiResponse, ReservationMessageResponse
from app.schemas.reservation.reservation_schema import (
    ReservationCancel, ReservationResponse, ReservationStatusUpdate
)
from app.services.reservation.reservation_service import ReservationService

router = APIRouter()

@router.get("", response_model=ApiResponse[PaginatedResponse[ReservationResponse]])
async def get_reservations(
    reservation_status: Optional[ReservationStatus] = Query(None, alias="status"),
    reservable_type: Optional[ReservableType] = Query(None, alias="type"),
    sent: Optional[bool] = Query(None),
    user_id: Optional[int] = Query(None),
    page_index: int = Query(1, ge=1),
    page_size: int = Query(100, ge=1, le=1000),
    session: AsyncSession = Depends(get_async_session)
):
    """Get reservations with their customer, supplier and booking"""
    service = ReservationService(session)
    data = await service.get_reservations(
        page_index=page_index,
        page_size=page_size,
        reservation_status=reservation_status,
        reservable_type=reservable_type,
        sent=sent,
        user_id=user_id
    )
    return ApiResponse(data=data)

@router.post("", response_model=ReservationMessageResponse, status_code=status.HTTP_201_CREATED)
async def create_reservation(
    payload: Dict[str, Any] = Body(...),
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    """
    Create a reservation. The body carries the shared fields plus the
    fields of the booking variant named by ``type``.
    """
    service = ReservationService(session)
    reservation = await service.create_reservation(payload, current_user_id)
    return ReservationMessageResponse(message="Reservation created successfully", reservation=reservation)

@router.get("/sent", response_model=ApiResponse[PaginatedResponse[ReservationResponse]])
async def get_sent_reservations(
    page_index: int = Query(1, ge=1),
    page_size: int = Query(100, ge=1, le=1000),
    session: AsyncSession = Depends(get_async_session)
):
    """Reservations handed over to accounting"""
    service = ReservationService(session)
    data = await service.get_reservations(page_index=page_index, page_size=page_size, sent=True)
    return ApiResponse(data=data)

@router.get("/{reservation_id}", response_model=ApiResponse[ReservationResponse])
async def get_reservation(
    reservation_id: int,
    session: AsyncSession = Depends(get_async_session)
):
    service = ReservationService(session)
    return ApiResponse(data=await service.get_reservation(reservation_id))

@router.put("/{reservation_id}", response_model=ReservationMessageResponse)
async def update_reservation(
    reservation_id: int,
    payload: Dict[str, Any] = Body(...),
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    """Partial update; fields left out keep their value"""
    service = ReservationService(session)
    reservation = await service.update_reservation(reservation_id, payload, current_user_id)
    return ReservationMessageResponse(message="Reservation updated successfully", reservation=reservation)

@router.delete("/{reservation_id}", response_model=ApiResponse)
async def delete_reservation(
    reservation_id: int,
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    service = ReservationService(session)
    await service.delete_reservation(reservation_id, current_user_id)
    return ApiResponse(message="Reservation deleted successfully")

@router.patch("/{reservation_id}/status", response_model=ApiResponse[ReservationResponse])
async def update_reservation_status(
    reservation_id: int,
    request: ReservationStatusUpdate,
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    service = ReservationService(session)
    data = await service.update_status(reservation_id, request, current_user_id)
    return ApiResponse(message="Reservation status updated successfully", data=data)

@router.post("/{reservation_id}/cancel", response_model=ApiResponse[ReservationResponse])
async def cancel_reservation(
    reservation_id: int,
    request: ReservationCancel,
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    service = ReservationService(session)
    data = await service.cancel_reservation(reservation_id, request, current_user_id)
    return ApiResponse(message="Reservation cancelled successfully", data=data)

@router.post("/{reservation_id}/send", response_model=ApiResponse[ReservationResponse])
async def send_reservation(
    reservation_id: int,
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    service = ReservationService(session)
    data = await service.send_reservation(reservation_id, current_user_id)
    return ApiResponse(message="Reservation sent successfully", data=data)
