from datetime import date, datetime
from typing import Optional

from models.driver_attendance import AttendanceStatus
from schemas.common import CamelModel, Money


class DriverBase(CamelModel):
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    daily_wage: Money = 0
    is_active: bool = True

class DriverCreate(DriverBase):
    pass

class DriverUpdate(CamelModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    daily_wage: Optional[Money] = None
    is_active: Optional[bool] = None

class Driver(DriverBase):
    id: int
    tenant_id: str
    created_at: datetime
    updated_at: Optional[datetime] = None


class AttendanceMark(CamelModel):
    date: date
    status: AttendanceStatus = AttendanceStatus.PRESENT
    note: Optional[str] = None

class Attendance(CamelModel):
    id: int
    driver_id: int
    attendance_date: date
    status: AttendanceStatus
    note: Optional[str] = None
    marked_by: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class AttendanceSummary(CamelModel):
    present_days: int
    half_days: int
    absent_days: int
    attendance_units: Money

class SalaryBreakdown(CamelModel):
    driver_id: int
    driver_name: str
    month: str
    daily_wage: Money
    attendance: AttendanceSummary
    gross_pay: Money
    driver_expenses: Money
    net_pay: Money
