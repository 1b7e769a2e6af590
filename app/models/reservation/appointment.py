from sqlalchemy import Column, String, DateTime, Text, Enum as SQLEnum
from app.db.base import BaseModel
from app.models.shared.enums import AppointmentStatus

class Appointment(BaseModel):
    __tablename__ = 'appointments'

    appointment_type = Column(String(50), nullable=False)
    appointment_date = Column(DateTime, nullable=False)
    location = Column(String(255), nullable=False)
    status = Column(SQLEnum(AppointmentStatus), nullable=False, default=AppointmentStatus.SCHEDULED)
    notes = Column(Text)
