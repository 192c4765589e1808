from datetime import date, datetime
from typing import Optional

from pydantic import Field

from models.payments import PaymentMethod, PaymentRelatedTo, PaymentStatus, PaymentType
from schemas.common import CamelModel, Money


class PaymentBase(CamelModel):
    payment_type: PaymentType = Field(alias="type")
    related_to: PaymentRelatedTo
    related_id: int
    amount: Money = Field(ge=0)
    invoice_id: Optional[int] = None
    collection_id: Optional[int] = None
    delivery_id: Optional[int] = None
    expense_id: Optional[int] = None
    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_date: Optional[date] = None
    reference_number: Optional[str] = None
    notes: Optional[str] = None

class PaymentCreate(PaymentBase):
    pass

class PaymentUpdate(CamelModel):
    status: Optional[PaymentStatus] = None
    payment_method: Optional[PaymentMethod] = None
    reference_number: Optional[str] = None
    notes: Optional[str] = None

class Payment(PaymentBase):
    id: int
    tenant_id: str
    payment_date: date
    status: PaymentStatus
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
