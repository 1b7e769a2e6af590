from sqlalchemy import Column, String, Enum as SQLEnum
from sqlalchemy.orm import relationship
from app.db.base import BaseModel
from app.models.shared.enums import SupplierPaymentStatus

class Supplier(BaseModel):
    __tablename__ = 'suppliers'

    name = Column(String(255), nullable=False)
    phone = Column(String(20))
    payment_status = Column(SQLEnum(SupplierPaymentStatus), nullable=False, default=SupplierPaymentStatus.UNPAID)

    # Relationships
    reservations = relationship("Reservation", back_populates="supplier")
