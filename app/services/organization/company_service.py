import logging
from typing import Any, Dict, Optional
from fastapi import HTTPException, status
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.core.config import settings as app_settings
from app.core.exceptions import NotFoundError, ValidationError
from app.models.auth.user import User
from app.models.organization.company import Company
from app.schemas.organization.company_schema import (
    CompanySettings, CompanySettingsUpdate, ShiftSettings
)
from app.utils.validation_errors import errors_from_pydantic

logger = logging.getLogger(__name__)


def default_shift_settings() -> ShiftSettings:
    """Shift rules for users outside any company, taken from the environment"""
    return ShiftSettings(
        default_shift_hours=app_settings.DEFAULT_SHIFT_HOURS,
        default_break_minutes=app_settings.DEFAULT_BREAK_MINUTES,
        auto_end_shift=app_settings.AUTO_END_SHIFT,
        shifts_per_day=app_settings.SHIFTS_PER_DAY,
    )


def merge_settings(stored: Optional[Dict[str, Any]], patch: Optional[Dict[str, Any]] = None) -> CompanySettings:
    """
    Overlay stored settings (and an optional patch) onto the defaults.

    Merging is section by section: a nested section such as ``shiftSettings``
    keeps every key the overlay does not mention. ``None`` values in a patch
    leave the current value untouched.
    """
    defaults = CompanySettings(shift_settings=default_shift_settings())
    merged = defaults.model_dump(by_alias=True)

    for overlay in (stored or {}, patch or {}):
        for section, value in overlay.items():
            if value is None:
                continue
            if isinstance(value, dict) and isinstance(merged.get(section), dict):
                merged[section] = {
                    **merged[section],
                    **{k: v for k, v in value.items() if v is not None},
                }
            else:
                merged[section] = value

    return CompanySettings.model_validate(merged)


class CompanyService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_company(self, company_id: int) -> Company:
        result = await self.session.execute(
            select(Company).where(Company.id == company_id, Company.is_deleted == False)
        )
        company = result.scalar_one_or_none()
        if company is None:
            raise NotFoundError(f"Company {company_id} not found")
        return company

    def serialize(self, company: Company) -> Dict[str, Any]:
        return {
            "id": company.id,
            "name": company.name,
            "subdomain": company.subdomain,
            "is_active": company.is_active,
            "settings": merge_settings(company.settings).model_dump(by_alias=True),
            "created_at": company.created_at,
            "updated_at": company.updated_at,
        }

    async def get_company_detail(self, company_id: int) -> Dict[str, Any]:
        company = await self.get_company(company_id)
        return self.serialize(company)

    async def update_settings(
        self,
        company_id: int,
        data: CompanySettingsUpdate,
        current_user_id: Optional[int] = None
    ) -> Dict[str, Any]:
        """Merge a partial settings body into the company's stored settings"""
        try:
            company = await self.get_company(company_id)
            patch = data.model_dump(by_alias=True, exclude_unset=True)

            try:
                merged = merge_settings(company.settings, patch)
            except PydanticValidationError as e:
                raise ValidationError("Invalid company settings", errors_from_pydantic(e))

            company.settings = merged.model_dump(by_alias=True)
            if current_user_id is not None:
                company.updated_by = current_user_id

            await self.session.commit()
            await self.session.refresh(company)

            logger.info(f"Settings updated for company {company.id} by user {current_user_id}")
            return self.serialize(company)

        except HTTPException:
            raise
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Error updating settings for company {company_id}: {e}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error updating company settings")

    async def get_shift_settings(self, user: User) -> ShiftSettings:
        """Effective shift rules for ``user``: company settings over environment defaults"""
        if user.company_id is None:
            return default_shift_settings()

        result = await self.session.execute(
            select(Company.settings).where(Company.id == user.company_id, Company.is_deleted == False)
        )
        stored = result.scalar_one_or_none()
        return merge_settings(stored).shift_settings
