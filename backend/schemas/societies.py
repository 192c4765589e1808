from datetime import date, datetime
from typing import List, Optional

from models.invoices import InvoiceStatus
from schemas.common import CamelModel, Money
from schemas.invoices import InvoicePeriod


class SocietyBase(CamelModel):
    name: str
    contact_name: Optional[str] = None
    phone: str
    email: Optional[str] = None
    address: Optional[str] = None
    delivery_rate: Money = 0
    payment_terms: str = "cash"
    is_active: bool = True

class SocietyCreate(SocietyBase):
    pass

class SocietyUpdate(CamelModel):
    name: Optional[str] = None
    contact_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    delivery_rate: Optional[Money] = None
    payment_terms: Optional[str] = None
    is_active: Optional[bool] = None

class Society(SocietyBase):
    id: int
    tenant_id: str
    created_at: datetime
    updated_at: Optional[datetime] = None


class OutstandingInvoice(CamelModel):
    id: int
    invoice_number: str
    total: Money
    paid: Money
    outstanding: Money
    due_date: Optional[date] = None
    status: InvoiceStatus
    created_at: datetime
    period: Optional[InvoicePeriod] = None

class UnbilledDelivery(CamelModel):
    id: int
    quantity: Money
    rate: Money
    total_amount: Money
    created_at: datetime
    vehicle_number: Optional[str] = None
    driver_name: Optional[str] = None

class SocietyOutstanding(CamelModel):
    outstanding_invoices: List[OutstandingInvoice] = []
    total_outstanding: Money
    total_invoiced: Money
    total_paid: Money
    unbilled_deliveries: List[UnbilledDelivery] = []
    unbilled_amount: Money
