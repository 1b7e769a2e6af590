from sqlalchemy import Column, String, Boolean, JSON
from sqlalchemy.orm import relationship
from app.db.base import BaseModel

class Company(BaseModel):
    __tablename__ = 'companies'

    name = Column(String(200), nullable=False)
    subdomain = Column(String(100), unique=True, index=True, nullable=False)
    settings = Column(JSON, default=dict)  # Partial; merged over defaults when read
    is_active = Column(Boolean, default=True)

    # Relationships
    users = relationship("User", back_populates="company")
