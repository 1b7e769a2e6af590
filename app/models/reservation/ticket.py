from sqlalchemy import Column, Integer, String, DateTime, Text, Enum as SQLEnum
from app.db.base import BaseModel
from app.models.shared.enums import BookingStatus

class Ticket(BaseModel):
    __tablename__ = 'tickets'

    event_name = Column(String(255), nullable=False)
    event_date = Column(DateTime, nullable=False)
    tickets_count = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False)
    seat_category = Column(String(50), nullable=False)
    status = Column(SQLEnum(BookingStatus), nullable=False, default=BookingStatus.PENDING)
    notes = Column(Text)
