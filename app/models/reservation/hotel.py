from sqlalchemy import Column, Integer, String, Date, Text, Enum as SQLEnum
from app.db.base import BaseModel
from app.models.shared.enums import BookingStatus

class Hotel(BaseModel):
    __tablename__ = 'hotels'

    name = Column(String(255), nullable=False)
    booking_number = Column(String(50), nullable=False)
    number_of_guests = Column(Integer, nullable=False)
    number_of_rooms = Column(Integer, nullable=False)
    room_type = Column(String(50), nullable=False)
    check_in_date = Column(Date, nullable=False)
    check_out_date = Column(Date, nullable=False)
    status = Column(SQLEnum(BookingStatus), nullable=False, default=BookingStatus.PENDING)
    notes = Column(Text)
