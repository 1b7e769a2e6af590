from sqlalchemy import Column, Integer, DateTime, Text, ForeignKey, Index, CheckConstraint, text
from sqlalchemy.orm import relationship
from app.db.base import BaseModel

class Break(BaseModel):
    __tablename__ = 'breaks'

    shift_id = Column(Integer, ForeignKey('shifts.id', ondelete='CASCADE'), nullable=False, index=True)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=True)  # NULL means in progress
    notes = Column(Text)

    __table_args__ = (
        CheckConstraint('end_time IS NULL OR end_time >= start_time', name='ck_breaks_end_after_start'),
        # One in-progress break per shift
        Index(
            'uq_breaks_shift_open',
            'shift_id',
            unique=True,
            postgresql_where=text('end_time IS NULL AND is_deleted = false'),
            sqlite_where=text('end_time IS NULL AND is_deleted = 0'),
        ),
    )

    # Relationships
    shift = relationship("Shift", back_populates="breaks")
