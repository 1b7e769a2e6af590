from pydantic import BaseModel, ConfigDict, Field, validator
from typing import Any, Dict, List, Optional
from datetime import datetime

class ShiftSettings(BaseModel):
    """Per-company shift rules; every field falls back to its default when unset"""
    model_config = ConfigDict(populate_by_name=True)

    default_shift_hours: int = Field(8, alias="defaultShiftHours", ge=1, le=24)
    default_break_minutes: int = Field(60, alias="defaultBreakMinutes", ge=0)
    auto_end_shift: bool = Field(True, alias="autoEndShift")
    shifts_per_day: int = Field(1, alias="shiftsPerDay", ge=1)
    weekend_days: List[int] = Field(default_factory=lambda: [5, 6], alias="weekendDays")

    @validator('weekend_days')
    def validate_weekend_days(cls, v):
        if any(day < 0 or day > 6 for day in v):
            raise ValueError('Weekend days must be weekday numbers between 0 (Monday) and 6 (Sunday)')
        return sorted(set(v))

class GeneralSettings(BaseModel):
    timezone: str = "UTC+02:00"
    currency: str = "EGP"

class CompanySettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    site_name: str = Field("Company Portal", alias="siteName")
    primary_color: str = Field("#3b82f6", alias="primaryColor")
    secondary_color: str = Field("#1e40af", alias="secondaryColor")
    shift_settings: ShiftSettings = Field(default_factory=ShiftSettings, alias="shiftSettings")
    general: GeneralSettings = Field(default_factory=GeneralSettings)
    roles: List[str] = Field(default_factory=lambda: ["admin", "employee", "manager", "accountant"])

class ShiftSettingsUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    default_shift_hours: Optional[int] = Field(None, alias="defaultShiftHours", ge=1, le=24)
    default_break_minutes: Optional[int] = Field(None, alias="defaultBreakMinutes", ge=0)
    auto_end_shift: Optional[bool] = Field(None, alias="autoEndShift")
    shifts_per_day: Optional[int] = Field(None, alias="shiftsPerDay", ge=1)
    weekend_days: Optional[List[int]] = Field(None, alias="weekendDays")

class GeneralSettingsUpdate(BaseModel):
    timezone: Optional[str] = None
    currency: Optional[str] = None

class CompanySettingsUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    site_name: Optional[str] = Field(None, alias="siteName")
    primary_color: Optional[str] = Field(None, alias="primaryColor")
    secondary_color: Optional[str] = Field(None, alias="secondaryColor")
    shift_settings: Optional[ShiftSettingsUpdate] = Field(None, alias="shiftSettings")
    general: Optional[GeneralSettingsUpdate] = None
    roles: Optional[List[str]] = None

class CompanyResponse(BaseModel):
    id: int
    name: str
    subdomain: str
    is_active: bool
    settings: Dict[str, Any]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
