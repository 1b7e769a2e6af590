from sqlalchemy import Column, Integer, Boolean, Text, Numeric, ForeignKey, Enum as SQLEnum, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.base import BaseModel
from app.models.shared.enums import ReservableType, ReservationStatus

class Reservation(BaseModel):
    """Financial and customer wrapper around exactly one booking row.

    ``reservable_type`` is the variant tag and ``reservable_id`` the primary key
    of the row in that variant's table.
    """
    __tablename__ = 'reservations'

    user_id = Column(Integer, ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    customer_id = Column(Integer, ForeignKey('customers.id', ondelete='CASCADE'), nullable=False)
    supplier_id = Column(Integer, ForeignKey('suppliers.id'), nullable=True)
    reservable_type = Column(SQLEnum(ReservableType), nullable=False)
    reservable_id = Column(Integer, nullable=False)
    status = Column(SQLEnum(ReservationStatus), nullable=False, default=ReservationStatus.HOLD)
    sell_price = Column(Numeric(12, 2), nullable=False)
    cost = Column(Numeric(12, 2), nullable=False)
    fees = Column(Numeric(12, 2), nullable=False, default=0)
    net_profit = Column(Numeric(12, 2), nullable=False)
    notes = Column(Text)
    reason_cancelled = Column(Text)
    sent = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint('reservable_type', 'reservable_id', name='uq_reservations_reservable'),
    )

    # Relationships
    customer = relationship("Customer", back_populates="reservations")
    supplier = relationship("Supplier", back_populates="reservations")
