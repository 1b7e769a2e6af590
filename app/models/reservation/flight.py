from sqlalchemy import Column, String, DateTime, Text, Enum as SQLEnum
from app.db.base import BaseModel
from app.models.shared.enums import BookingStatus

class Flight(BaseModel):
    __tablename__ = 'flights'

    flight_number = Column(String(50), nullable=False)
    from_airport = Column(String(50), nullable=False)
    to_airport = Column(String(50), nullable=False)
    departure_date = Column(DateTime, nullable=False)
    arrival_date = Column(DateTime, nullable=False)
    airline = Column(String(50), nullable=False)
    passenger_info = Column(Text, nullable=False)
    status = Column(SQLEnum(BookingStatus), nullable=False, default=BookingStatus.PENDING)
    notes = Column(Text)
