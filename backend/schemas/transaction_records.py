from datetime import datetime
from typing import Optional

from pydantic import Field

from models.transaction_records import RecordStatus
from schemas.common import CamelModel, Money


class RecordUpdate(CamelModel):
    """Editable while the record is still pending; total is always re-derived."""
    quantity: Optional[Money] = Field(default=None, ge=0)
    rate: Optional[Money] = None
    notes: Optional[str] = None

class RecordStatusUpdate(CamelModel):
    status: RecordStatus


class CollectionCreate(CamelModel):
    supplier_id: int
    vehicle_id: int
    driver_id: int
    quantity: Money = Field(ge=0)
    rate: Optional[Money] = None  # defaults to the supplier's purchase rate
    status: RecordStatus = RecordStatus.PENDING
    notes: Optional[str] = None

class Collection(CamelModel):
    id: int
    tenant_id: str
    supplier_id: int
    vehicle_id: int
    driver_id: int
    quantity: Money
    rate: Money
    total_amount: Money
    status: RecordStatus
    is_invoiced: bool
    invoice_id: Optional[int] = None
    vehicle_number: Optional[str] = None
    driver_name: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class DeliveryCreate(CamelModel):
    society_id: int
    vehicle_id: int
    driver_id: int
    collection_id: Optional[int] = None
    quantity: Money = Field(ge=0)
    rate: Optional[Money] = None  # defaults to the society's delivery rate
    status: RecordStatus = RecordStatus.COMPLETED
    signed_by: Optional[str] = None
    notes: Optional[str] = None

class Delivery(CamelModel):
    id: int
    tenant_id: str
    society_id: int
    vehicle_id: int
    driver_id: int
    collection_id: Optional[int] = None
    quantity: Money
    rate: Money
    total_amount: Money
    status: RecordStatus
    is_invoiced: bool
    invoice_id: Optional[int] = None
    vehicle_number: Optional[str] = None
    driver_name: Optional[str] = None
    signed_by: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
