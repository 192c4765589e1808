"""Driver attendance ledger and the monthly salary derived from it."""
import logging
from decimal import Decimal
from typing import Dict, List

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from crud.drivers import get_driver
from exceptions import NotFoundError
from models.driver_attendance import AttendanceStatus, DriverAttendance
from models.drivers import Driver
from models.expenses import ChargedTo, Expense, ExpenseCategory, ExpenseStatus
from schemas import drivers as schemas
from utils import to_money
from utils.dates import month_range

logger = logging.getLogger("attendance")

HALF_DAY_WEIGHT = Decimal("0.5")


def _require_driver(db: Session, driver_id: int, tenant_id: str) -> Driver:
    driver = get_driver(db, driver_id, tenant_id)
    if driver is None:
        raise NotFoundError(f"Driver {driver_id} not found")
    return driver

def _find_attendance(db: Session, tenant_id: str, driver_id: int, attendance_date):
    return db.query(DriverAttendance).filter(
        DriverAttendance.tenant_id == tenant_id,
        DriverAttendance.driver_id == driver_id,
        DriverAttendance.attendance_date == attendance_date,
    ).first()

def mark_attendance(db: Session, tenant_id: str, driver_id: int, mark: schemas.AttendanceMark, user_id: str = None) -> DriverAttendance:
    """Upsert the driver's record for the day; marking the same day again overwrites status and note."""
    _require_driver(db, driver_id, tenant_id)

    for attempt in range(2):
        record = _find_attendance(db, tenant_id, driver_id, mark.date)
        if record is None:
            record = DriverAttendance(
                tenant_id=tenant_id,
                driver_id=driver_id,
                attendance_date=mark.date,
                created_by=user_id,
            )
            db.add(record)
        else:
            record.updated_by = user_id
        record.status = mark.status
        record.note = mark.note
        record.marked_by = user_id
        try:
            db.commit()
            break
        except IntegrityError:
            # Lost a race with a concurrent first mark for the same day; update that row instead.
            db.rollback()
            if attempt:
                raise
    db.refresh(record)
    logger.info(f"Attendance for driver {driver_id} on {mark.date} marked {mark.status.value}")
    return record

def list_attendance(db: Session, tenant_id: str, driver_id: int, month: str) -> List[DriverAttendance]:
    _require_driver(db, driver_id, tenant_id)
    first_day, next_month = month_range(month)
    return (
        db.query(DriverAttendance)
        .filter(
            DriverAttendance.tenant_id == tenant_id,
            DriverAttendance.driver_id == driver_id,
            DriverAttendance.attendance_date >= first_day,
            DriverAttendance.attendance_date < next_month,
        )
        .order_by(DriverAttendance.attendance_date)
        .all()
    )


def calculate_salary(db: Session, tenant_id: str, driver_id: int, month: str) -> Dict:
    """Gross pay from attendance units and daily wage, less approved non-fuel expenses charged to the driver.

    A half day counts as exactly half a unit; net pay never goes below zero.
    """
    first_day, next_month = month_range(month)
    driver = _require_driver(db, driver_id, tenant_id)

    counts = dict(
        db.query(DriverAttendance.status, func.count(DriverAttendance.id))
        .filter(
            DriverAttendance.tenant_id == tenant_id,
            DriverAttendance.driver_id == driver_id,
            DriverAttendance.attendance_date >= first_day,
            DriverAttendance.attendance_date < next_month,
        )
        .group_by(DriverAttendance.status)
        .all()
    )
    present_days = counts.get(AttendanceStatus.PRESENT, 0)
    half_days = counts.get(AttendanceStatus.HALF, 0)
    absent_days = counts.get(AttendanceStatus.ABSENT, 0)
    attendance_units = Decimal(present_days) + HALF_DAY_WEIGHT * half_days

    daily_wage = to_money(driver.daily_wage)
    gross_pay = to_money(attendance_units * daily_wage)

    driver_expenses = to_money(
        db.query(func.coalesce(func.sum(Expense.amount), 0))
        .filter(
            Expense.tenant_id == tenant_id,
            Expense.driver_id == driver_id,
            Expense.status == ExpenseStatus.APPROVED,
            Expense.charged_to == ChargedTo.DRIVER,
            Expense.category != ExpenseCategory.FUEL,
            Expense.expense_date >= first_day,
            Expense.expense_date < next_month,
        )
        .scalar()
    )
    net_pay = max(to_money(0), gross_pay - driver_expenses)

    return {
        "driver_id": driver.id,
        "driver_name": driver.name,
        "month": month,
        "daily_wage": daily_wage,
        "attendance": {
            "present_days": present_days,
            "half_days": half_days,
            "absent_days": absent_days,
            "attendance_units": attendance_units,
        },
        "gross_pay": gross_pay,
        "driver_expenses": driver_expenses,
        "net_pay": net_pay,
    }
