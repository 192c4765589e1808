import enum

from sqlalchemy import Column, Date, Enum, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from database import Base
from models.audit_mixin import TenantMixin, TimestampMixin


class PaymentType(enum.Enum):
    PURCHASE = "purchase"
    DELIVERY = "delivery"
    EXPENSE = "expense"
    OTHER = "other"


class PaymentRelatedTo(enum.Enum):
    SUPPLIER = "supplier"
    SOCIETY = "society"
    DRIVER = "driver"
    VENDOR = "vendor"


class PaymentMethod(enum.Enum):
    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"
    UPI = "upi"
    CHEQUE = "cheque"
    CARD = "card"
    NEFT = "neft"
    RTGS = "rtgs"


class PaymentStatus(enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class Payment(Base, TenantMixin, TimestampMixin):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    payment_type = Column(Enum(PaymentType), nullable=False)
    related_to = Column(Enum(PaymentRelatedTo), nullable=False)
    related_id = Column(Integer, nullable=False, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=True, index=True)
    collection_id = Column(Integer, ForeignKey("collections.id"), nullable=True, index=True)
    delivery_id = Column(Integer, ForeignKey("deliveries.id"), nullable=True)
    expense_id = Column(Integer, ForeignKey("expenses.id"), nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    payment_method = Column(Enum(PaymentMethod), default=PaymentMethod.CASH, nullable=False)
    payment_date = Column(Date, nullable=False)
    # Only COMPLETED payments count toward paid / outstanding figures.
    status = Column(Enum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False)
    reference_number = Column(String, nullable=True)  # Cheque number, UTR, UPI ref etc.
    notes = Column(Text, nullable=True)

    invoice = relationship("Invoice", back_populates="payments")
    expense = relationship("Expense", foreign_keys=[expense_id])
