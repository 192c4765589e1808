from sqlalchemy import Boolean, Column, Integer, Numeric, String
from sqlalchemy.orm import relationship

from database import Base
from models.audit_mixin import TenantMixin, TimestampMixin


class Driver(Base, TenantMixin, TimestampMixin):
    __tablename__ = "drivers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    daily_wage = Column(Numeric(12, 2), nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    vehicles = relationship("Vehicle", back_populates="driver")
    attendance = relationship("DriverAttendance", back_populates="driver", cascade="all, delete-orphan")
