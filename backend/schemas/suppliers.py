from datetime import datetime
from typing import List, Optional

from schemas.common import CamelModel, Money


class SupplierBase(CamelModel):
    name: str
    contact_name: Optional[str] = None
    phone: str
    email: Optional[str] = None
    address: Optional[str] = None
    purchase_rate: Money = 0
    payment_terms: str = "cash"
    is_active: bool = True

class SupplierCreate(SupplierBase):
    pass

class SupplierUpdate(CamelModel):
    name: Optional[str] = None
    contact_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    purchase_rate: Optional[Money] = None
    payment_terms: Optional[str] = None
    is_active: Optional[bool] = None

class Supplier(SupplierBase):
    id: int
    tenant_id: str
    created_at: datetime
    updated_at: Optional[datetime] = None


class UnpaidCollection(CamelModel):
    id: int
    quantity: Money
    rate: Money
    total_amount: Money
    created_at: datetime
    vehicle_number: Optional[str] = None
    driver_name: Optional[str] = None

class SupplierOutstanding(CamelModel):
    total_collections: Money
    total_paid: Money
    outstanding: Money
    unpaid_collections: List[UnpaidCollection] = []
