from sqlalchemy import Column, String, DateTime, Text, Enum as SQLEnum
from app.db.base import BaseModel
from app.models.shared.enums import BookingStatus

class Cruise(BaseModel):
    __tablename__ = 'cruises'

    cruise_name = Column(String(255), nullable=False)
    ship_name = Column(String(255), nullable=False)
    cabin_type = Column(String(50), nullable=False)
    departure_date = Column(DateTime, nullable=False)
    arrival_date = Column(DateTime, nullable=False)
    departure_port = Column(String(255), nullable=False)
    arrival_port = Column(String(255), nullable=False)
    cruise_line = Column(String(255), nullable=False)
    status = Column(SQLEnum(BookingStatus), nullable=False, default=BookingStatus.PENDING)
    notes = Column(Text)
