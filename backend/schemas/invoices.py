from datetime import date, datetime
from typing import List, Optional

from pydantic import field_validator

from models.invoices import InvoiceRelatedTo, InvoiceStatus, InvoiceType
from schemas.common import CamelModel, Money


class InvoicePeriod(CamelModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None

class InvoiceItem(CamelModel):
    id: int
    source_record_id: Optional[int] = None
    collection_id: Optional[int] = None
    delivery_id: Optional[int] = None
    date: Optional[datetime] = None
    driver_name: Optional[str] = None
    vehicle_number: Optional[str] = None
    quantity: Money
    rate: Money
    amount: Money

class InvoiceGenerateRequest(CamelModel):
    # Left optional so that missing fields surface as a 400 from the generator
    # rather than a schema error.
    related_id: Optional[int] = None
    related_to: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None

class InvoiceUpdate(CamelModel):
    tax: Optional[Money] = None
    discount: Optional[Money] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None

class Invoice(CamelModel):
    id: int
    tenant_id: str
    invoice_number: str
    invoice_type: InvoiceType
    related_to: InvoiceRelatedTo
    related_id: int
    period: Optional[InvoicePeriod] = None
    items: List[InvoiceItem] = []
    subtotal: Money
    tax: Money
    discount: Money
    total: Money
    status: InvoiceStatus
    due_date: Optional[date] = None
    sent_date: Optional[datetime] = None
    paid_date: Optional[datetime] = None
    payments: List[int] = []
    notes: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    @field_validator("payments", mode="before")
    @classmethod
    def payment_ids(cls, value):
        return [getattr(payment, "id", payment) for payment in value or []]

class OverdueSweepResult(CamelModel):
    marked_overdue: int
