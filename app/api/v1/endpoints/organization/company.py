from fastapi import APIRouter, Depends
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import get_current_user_id
from app.core.database import get_async_session
from app.schemas.common.response import ApiResponse
from app.schemas.organization.company_schema import CompanyResponse, CompanySettingsUpdate
from app.services.organization.company_service import CompanyService

router = APIRouter()

@router.get("/{company_id}", response_model=ApiResponse[CompanyResponse])
async def get_company(
    company_id: int,
    session: AsyncSession = Depends(get_async_session)
):
    """Company with its settings merged over the defaults"""
    service = CompanyService(session)
    return ApiResponse(data=await service.get_company_detail(company_id))

@router.patch("/{company_id}/settings", response_model=ApiResponse[CompanyResponse])
async def update_company_settings(
    company_id: int,
    settings: CompanySettingsUpdate,
    session: AsyncSession = Depends(get_async_session),
    current_user_id: Optional[int] = Depends(get_current_user_id)
):
    service = CompanyService(session)
    data = await service.update_settings(company_id, settings, current_user_id)
    return ApiResponse(message="Settings updated successfully", data=data)
