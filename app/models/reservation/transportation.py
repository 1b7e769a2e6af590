from sqlalchemy import Column, Integer, String, DateTime, Text, Enum as SQLEnum
from app.db.base import BaseModel
from app.models.shared.enums import BookingStatus

class Transportation(BaseModel):
    __tablename__ = 'transportations'

    transport_type = Column(String(50), nullable=False)  # Bus, Train, Car Rental
    transportation_date = Column(DateTime, nullable=False)
    pickup_location = Column(String(255), nullable=False)
    dropoff_location = Column(String(255), nullable=False)
    route_from = Column(String(255), nullable=False)
    route_to = Column(String(255), nullable=False)
    passenger_count = Column(Integer, nullable=False)
    status = Column(SQLEnum(BookingStatus), nullable=False, default=BookingStatus.PENDING)
    notes = Column(Text)
