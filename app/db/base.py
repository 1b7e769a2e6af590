from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Integer, DateTime, Boolean
from sqlalchemy.sql import func
from app.models.base import Base
from app.utils.date_time_utils import utc_now

class BaseModel(Base):
    """Base model with common fields"""
    __abstract__ = True

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    is_deleted = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(DateTime, nullable=True)
    created_by = Column(Integer, nullable=True)
    updated_by = Column(Integer, nullable=True)

    def soft_delete(self, user_id: Optional[int] = None, at: Optional[datetime] = None) -> None:
        """Mark the row as logically removed; it stays in the table for audit."""
        self.is_deleted = True
        self.deleted_at = at or utc_now()
        if user_id is not None:
            self.updated_by = user_id
