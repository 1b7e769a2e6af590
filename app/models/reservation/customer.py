from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from app.db.base import BaseModel

class Customer(BaseModel):
    __tablename__ = 'customers'

    name = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)

    # Relationships
    reservations = relationship("Reservation", back_populates="customer")
