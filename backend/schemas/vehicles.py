from datetime import datetime
from typing import Optional

from schemas.common import CamelModel, Money


class VehicleBase(CamelModel):
    vehicle_number: str
    vehicle_type: Optional[str] = None
    capacity: Money = 0
    driver_id: Optional[int] = None
    is_active: bool = True

class VehicleCreate(VehicleBase):
    pass

class VehicleUpdate(CamelModel):
    vehicle_number: Optional[str] = None
    vehicle_type: Optional[str] = None
    capacity: Optional[Money] = None
    driver_id: Optional[int] = None
    is_active: Optional[bool] = None

class Vehicle(VehicleBase):
    id: int
    tenant_id: str
    created_at: datetime
    updated_at: Optional[datetime] = None
