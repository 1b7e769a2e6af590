from sqlalchemy import Column, String, Date, Text, Enum as SQLEnum
from app.db.base import BaseModel
from app.models.shared.enums import InsuranceStatus

class Insurance(BaseModel):
    __tablename__ = 'insurances'

    insurance_type = Column(String(50), nullable=False)
    provider = Column(String(255), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    insured_persons = Column(Text, nullable=False)
    status = Column(SQLEnum(InsuranceStatus), nullable=False, default=InsuranceStatus.ACTIVE)
    notes = Column(Text)
