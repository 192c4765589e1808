import enum

from sqlalchemy import Column, Date, DateTime, Enum, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from database import Base
from models.audit_mixin import TenantMixin, TimestampMixin


class InvoiceType(enum.Enum):
    PURCHASE = "purchase"
    DELIVERY = "delivery"
    MONTHLY = "monthly"


class InvoiceRelatedTo(enum.Enum):
    SUPPLIER = "supplier"
    SOCIETY = "society"


class InvoiceStatus(enum.Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class Invoice(Base, TenantMixin, TimestampMixin):
    __tablename__ = "invoices"
    __table_args__ = (UniqueConstraint('tenant_id', 'invoice_number', name='_tenant_invoice_number_uc'),)

    id = Column(Integer, primary_key=True, index=True)
    invoice_number = Column(String, nullable=False, index=True)
    invoice_type = Column(Enum(InvoiceType), nullable=False)
    related_to = Column(Enum(InvoiceRelatedTo), nullable=False)
    related_id = Column(Integer, nullable=False, index=True)  # supplier or society id
    period_start = Column(Date, nullable=True)
    period_end = Column(Date, nullable=True)
    subtotal = Column(Numeric(12, 2), nullable=False, default=0)  # fixed at generation
    tax = Column(Numeric(12, 2), nullable=False, default=0)
    discount = Column(Numeric(12, 2), nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False, default=0)  # subtotal + tax - discount
    status = Column(Enum(InvoiceStatus), default=InvoiceStatus.DRAFT, nullable=False)
    due_date = Column(Date, nullable=True)
    sent_date = Column(DateTime(timezone=True), nullable=True)  # first time the invoice left draft
    paid_date = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)

    items = relationship("InvoiceItem", back_populates="invoice", cascade="all, delete-orphan", order_by="InvoiceItem.id")
    payments = relationship("Payment", back_populates="invoice", order_by="Payment.id")

    @property
    def period(self):
        if self.period_start is None and self.period_end is None:
            return None
        return {"start_date": self.period_start, "end_date": self.period_end}


class InvoiceItem(Base):
    """Point-in-time copy of one source record. Never re-read from the source."""
    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=False, index=True)
    collection_id = Column(Integer, ForeignKey("collections.id"), nullable=True)
    delivery_id = Column(Integer, ForeignKey("deliveries.id"), nullable=True)
    date = Column(DateTime(timezone=True), nullable=True)
    driver_name = Column(String, nullable=True)
    vehicle_number = Column(String, nullable=True)
    quantity = Column(Numeric(12, 3), nullable=False)
    rate = Column(Numeric(12, 4), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)

    invoice = relationship("Invoice", back_populates="items")

    @property
    def source_record_id(self):
        return self.delivery_id if self.delivery_id is not None else self.collection_id


class InvoiceCounter(Base):
    """Last issued sequence per tenant, invoice type and calendar month (YYYYMM)."""
    __tablename__ = "invoice_counters"
    __table_args__ = (UniqueConstraint('tenant_id', 'invoice_type', 'period', name='_tenant_type_period_uc'),)

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, nullable=False)
    invoice_type = Column(Enum(InvoiceType), nullable=False)
    period = Column(String(6), nullable=False)
    last_value = Column(Integer, nullable=False, default=0)
