from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from app.models.shared.enums import NotificationCategory

class NotificationResponse(BaseModel):
    id: int
    user_id: int
    title: str
    message: str
    category: NotificationCategory
    reference_type: Optional[str] = None
    reference_id: Optional[int] = None
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
