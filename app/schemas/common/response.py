from typing import Dict, Generic, List, Optional, TypeVar
from pydantic import BaseModel

from app.schemas.reservation.reservation_schema import ReservationResponse

T = TypeVar("T")

class ApiResponse(BaseModel, Generic[T]):
    status: bool = True
    message: Optional[str] = None
    data: Optional[T] = None

class ErrorResponse(BaseModel):
    status: bool = False
    message: str
    errors: Optional[Dict[str, List[str]]] = None

class CountResponse(BaseModel):
    count: int

class ReservationMessageResponse(BaseModel):
    status: bool = True
    message: str
    reservation: ReservationResponse
