from sqlalchemy import Boolean, Column, Enum, ForeignKey, Integer, Numeric, Text
from sqlalchemy.orm import relationship

from database import Base
from models.audit_mixin import TenantMixin, TimestampMixin
from models.transaction_records import RecordStatus, TransactionRecordMixin, track_total_amount


@track_total_amount
class Collection(Base, TenantMixin, TimestampMixin, TransactionRecordMixin):
    """Water picked up from a supplier by a driver."""
    __tablename__ = "collections"

    id = Column(Integer, primary_key=True, index=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=False, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False)
    driver_id = Column(Integer, ForeignKey("drivers.id"), nullable=False, index=True)
    quantity = Column(Numeric(12, 3), nullable=False)
    rate = Column(Numeric(12, 4), nullable=False)  # purchase rate per litre
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)  # quantity * rate, derived
    status = Column(Enum(RecordStatus), default=RecordStatus.PENDING, nullable=False)
    is_invoiced = Column(Boolean, default=False, nullable=False)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=True)
    notes = Column(Text, nullable=True)

    supplier = relationship("Supplier", back_populates="collections")
    vehicle = relationship("Vehicle")
    driver = relationship("Driver")
    invoice = relationship("Invoice", foreign_keys=[invoice_id])
