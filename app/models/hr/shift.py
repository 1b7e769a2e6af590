from sqlalchemy import Column, Integer, DateTime, Text, ForeignKey, Index, CheckConstraint, text
from sqlalchemy.orm import relationship
from app.db.base import BaseModel

class Shift(BaseModel):
    __tablename__ = 'shifts'

    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=True)  # NULL means in progress
    total_break_seconds = Column(Integer, nullable=False, default=0)
    notes = Column(Text)

    __table_args__ = (
        CheckConstraint('total_break_seconds >= 0', name='ck_shifts_break_seconds_positive'),
        CheckConstraint('end_time IS NULL OR end_time >= start_time', name='ck_shifts_end_after_start'),
        # One in-progress shift per user
        Index(
            'uq_shifts_user_open',
            'user_id',
            unique=True,
            postgresql_where=text('end_time IS NULL AND is_deleted = false'),
            sqlite_where=text('end_time IS NULL AND is_deleted = 0'),
        ),
    )

    # Relationships
    user = relationship("User", back_populates="shifts")
    breaks = relationship(
        "Break",
        back_populates="shift",
        cascade="all, delete-orphan",
        order_by="Break.start_time",
    )

    @property
    def open_break(self):
        return next((b for b in self.breaks if b.end_time is None and not b.is_deleted), None)
