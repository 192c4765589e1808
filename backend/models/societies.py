from sqlalchemy import Boolean, Column, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from database import Base
from models.audit_mixin import TenantMixin, TimestampMixin


class Society(Base, TenantMixin, TimestampMixin):
    """Housing society the vendor delivers to and invoices."""
    __tablename__ = "societies"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    contact_name = Column(String, nullable=True)
    phone = Column(String, nullable=False)
    email = Column(String, nullable=True)
    address = Column(Text, nullable=True)
    delivery_rate = Column(Numeric(12, 4), nullable=False, default=0)  # per litre
    payment_terms = Column(String, nullable=False, default="cash")
    is_active = Column(Boolean, nullable=False, default=True)

    deliveries = relationship("Delivery", back_populates="society")
