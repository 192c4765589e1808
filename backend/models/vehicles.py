from sqlalchemy import Boolean, Column, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship

from database import Base
from models.audit_mixin import TenantMixin, TimestampMixin


class Vehicle(Base, TenantMixin, TimestampMixin):
    __tablename__ = "vehicles"
    __table_args__ = (UniqueConstraint('tenant_id', 'vehicle_number', name='_tenant_vehicle_number_uc'),)

    id = Column(Integer, primary_key=True, index=True)
    vehicle_number = Column(String, nullable=False)
    vehicle_type = Column(String, nullable=True)
    capacity = Column(Numeric(12, 2), nullable=False, default=0)  # litres
    driver_id = Column(Integer, ForeignKey("drivers.id"), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    driver = relationship("Driver", back_populates="vehicles")
