from sqlalchemy import Column, Integer, String, Date, Text, Enum as SQLEnum
from app.db.base import BaseModel
from app.models.shared.enums import VisaStatus

class Visa(BaseModel):
    __tablename__ = 'visas'

    country = Column(String(255), nullable=False)
    visa_type = Column(String(50), nullable=False)
    application_date = Column(Date, nullable=False)
    duration = Column(Integer, nullable=False)  # Days
    application_details = Column(Text, nullable=False)
    status = Column(SQLEnum(VisaStatus), nullable=False, default=VisaStatus.PENDING)
    notes = Column(Text)
