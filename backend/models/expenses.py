import enum

from sqlalchemy import Column, Date, DateTime, Enum, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from database import Base
from models.audit_mixin import TenantMixin, TimestampMixin


class ExpenseCategory(enum.Enum):
    FUEL = "fuel"
    TOLL = "toll"
    MAINTENANCE = "maintenance"
    FOOD = "food"
    MEDICAL = "medical"
    PERSONAL = "personal"
    OTHER = "other"


class ExpenseStatus(enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    PAID = "paid"


class ChargedTo(enum.Enum):
    VENDOR = "vendor"
    DRIVER = "driver"


class Expense(Base, TenantMixin, TimestampMixin):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    driver_id = Column(Integer, ForeignKey("drivers.id"), nullable=False, index=True)
    collection_id = Column(Integer, ForeignKey("collections.id"), nullable=True)
    delivery_id = Column(Integer, ForeignKey("deliveries.id"), nullable=True)
    category = Column(Enum(ExpenseCategory), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(Enum(ExpenseStatus), default=ExpenseStatus.PENDING, nullable=False)
    # Fuel is always borne by the vendor.
    charged_to = Column(Enum(ChargedTo), default=ChargedTo.VENDOR, nullable=False)
    approved_by = Column(String, nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    rejection_reason = Column(Text, nullable=True)
    payment_id = Column(Integer, nullable=True)  # payments.id once settled
    expense_date = Column(Date, nullable=False)

    driver = relationship("Driver")
