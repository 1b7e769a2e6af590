from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, Optional
from datetime import datetime
from decimal import Decimal

from app.models.shared.enums import (
    ReservableType, ReservationStatus, SupplierPaymentStatus
)

class ReservationDetails(BaseModel):
    sell_price: Decimal = Field(..., ge=1)
    cost: Decimal = Field(..., ge=0)
    fees: Optional[Decimal] = Field(None, ge=0)

class ReservationDetailsUpdate(BaseModel):
    sell_price: Optional[Decimal] = Field(None, ge=1)
    cost: Optional[Decimal] = Field(None, ge=0)
    fees: Optional[Decimal] = Field(None, ge=0)

class ReservationCreate(BaseModel):
    """Fields shared by every booking type; the variant block is validated separately."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = Field(..., min_length=1, max_length=255)
    phone_number: str = Field(..., alias="phoneNumber", min_length=1, max_length=20)
    type: ReservableType
    details: ReservationDetails
    net_profit: Optional[Decimal] = None
    notes: Optional[str] = Field(None, min_length=3, max_length=100)
    reason_cancelled: Optional[str] = None
    user_id: Optional[int] = None

class SupplierCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    supplier_name: str = Field(..., alias="supplierName", min_length=1, max_length=255)
    supplier_phone: Optional[str] = Field(
        None, max_length=20,
        validation_alias=AliasChoices("supplier_phone", "SupplierPhoneNumber", "supplierPhone"),
    )
    payment_status: SupplierPaymentStatus = SupplierPaymentStatus.UNPAID

class ReservationUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    phone_number: Optional[str] = Field(None, alias="phoneNumber", min_length=1, max_length=20)
    type: Optional[ReservableType] = None
    details: Optional[ReservationDetailsUpdate] = None
    net_profit: Optional[Decimal] = None
    status: Optional[ReservationStatus] = None
    notes: Optional[str] = Field(None, min_length=3, max_length=100)
    reason_cancelled: Optional[str] = None

class SupplierUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    supplier_name: Optional[str] = Field(None, alias="supplierName", min_length=1, max_length=255)
    supplier_phone: Optional[str] = Field(
        None, max_length=20,
        validation_alias=AliasChoices("supplier_phone", "SupplierPhoneNumber", "supplierPhone"),
    )
    payment_status: Optional[SupplierPaymentStatus] = None

class ReservationStatusUpdate(BaseModel):
    status: ReservationStatus

class ReservationCancel(BaseModel):
    reason_cancelled: str = Field(..., max_length=255)

    @field_validator('reason_cancelled')
    @classmethod
    def validate_reason(cls, v):
        if not v.strip():
            raise ValueError('A cancellation reason is required')
        return v.strip()

class CustomerResponse(BaseModel):
    id: int
    name: str
    phone: str

    class Config:
        from_attributes = True

class SupplierResponse(BaseModel):
    id: int
    name: str
    phone: Optional[str] = None
    payment_status: SupplierPaymentStatus

    class Config:
        from_attributes = True

class ReservationResponse(BaseModel):
    id: int
    user_id: Optional[int] = None
    customer: Optional[CustomerResponse] = None
    supplier: Optional[SupplierResponse] = None
    reservable_type: ReservableType
    reservable_id: int
    reservable: Optional[Dict[str, Any]] = None
    status: ReservationStatus
    sell_price: Decimal
    cost: Decimal
    fees: Decimal
    net_profit: Decimal
    notes: Optional[str] = None
    reason_cancelled: Optional[str] = None
    sent: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
