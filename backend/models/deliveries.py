from sqlalchemy import Boolean, Column, Enum, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from database import Base
from models.audit_mixin import TenantMixin, TimestampMixin
from models.transaction_records import RecordStatus, TransactionRecordMixin, track_total_amount


@track_total_amount
class Delivery(Base, TenantMixin, TimestampMixin, TransactionRecordMixin):
    """Water dropped at a society by a driver; billed through monthly invoices."""
    __tablename__ = "deliveries"

    id = Column(Integer, primary_key=True, index=True)
    society_id = Column(Integer, ForeignKey("societies.id"), nullable=False, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False)
    driver_id = Column(Integer, ForeignKey("drivers.id"), nullable=False, index=True)
    collection_id = Column(Integer, ForeignKey("collections.id"), nullable=True)
    quantity = Column(Numeric(12, 3), nullable=False)
    rate = Column(Numeric(12, 4), nullable=False)  # delivery rate per litre
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)  # quantity * rate, derived
    status = Column(Enum(RecordStatus), default=RecordStatus.PENDING, nullable=False)
    is_invoiced = Column(Boolean, default=False, nullable=False)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=True)
    signed_by = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    society = relationship("Society", back_populates="deliveries")
    vehicle = relationship("Vehicle")
    driver = relationship("Driver")
    collection = relationship("Collection")
    invoice = relationship("Invoice", foreign_keys=[invoice_id])
