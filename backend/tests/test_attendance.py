from datetime import date, timedelta
from decimal import Decimal

import pytest

from crud import attendance as crud
from exceptions import NotFoundError, ValidationError
from models.driver_attendance import AttendanceStatus, DriverAttendance
from models.expenses import ChargedTo, Expense, ExpenseCategory, ExpenseStatus
from schemas.drivers import AttendanceMark
from conftest import TENANT


def mark(db, seed, day, status, note=None):
    return crud.mark_attendance(db, TENANT, seed.driver.id, AttendanceMark(date=day, status=status, note=note), user_id="ops@example.com")


def add_expense(db, seed, amount, category=ExpenseCategory.FOOD, status=ExpenseStatus.APPROVED,
                charged_to=ChargedTo.DRIVER, expense_date=date(2025, 3, 12)):
    db.add(Expense(
        tenant_id=TENANT,
        driver_id=seed.driver.id,
        category=category,
        amount=Decimal(str(amount)),
        status=status,
        charged_to=charged_to,
        expense_date=expense_date,
    ))
    db.commit()


@pytest.fixture
def march_attendance(db, seed):
    start = date(2025, 3, 1)
    for offset in range(20):
        mark(db, seed, start + timedelta(days=offset), AttendanceStatus.PRESENT)
    for offset in range(20, 23):
        mark(db, seed, start + timedelta(days=offset), AttendanceStatus.HALF)
    for offset in range(23, 25):
        mark(db, seed, start + timedelta(days=offset), AttendanceStatus.ABSENT)


def test_salary_from_attendance_and_driver_expenses(db, seed, march_attendance):
    add_expense(db, seed, 1000)
    add_expense(db, seed, 200, category=ExpenseCategory.MEDICAL)
    # None of these reduce pay.
    add_expense(db, seed, 800, category=ExpenseCategory.FUEL)
    add_expense(db, seed, 300, status=ExpenseStatus.PENDING)
    add_expense(db, seed, 300, charged_to=ChargedTo.VENDOR)
    add_expense(db, seed, 300, expense_date=date(2025, 4, 1))

    salary = crud.calculate_salary(db, TENANT, seed.driver.id, "2025-03")

    assert salary["attendance"] == {
        "present_days": 20,
        "half_days": 3,
        "absent_days": 2,
        "attendance_units": Decimal("21.5"),
    }
    assert salary["daily_wage"] == Decimal("500.00")
    assert salary["gross_pay"] == Decimal("10750.00")
    assert salary["driver_expenses"] == Decimal("1200.00")
    assert salary["net_pay"] == Decimal("9550.00")


def test_net_pay_never_negative(db, seed, march_attendance):
    add_expense(db, seed, 12000)

    salary = crud.calculate_salary(db, TENANT, seed.driver.id, "2025-03")

    assert salary["driver_expenses"] == Decimal("12000.00")
    assert salary["net_pay"] == 0


def test_month_without_attendance(db, seed):
    salary = crud.calculate_salary(db, TENANT, seed.driver.id, "2025-02")
    assert salary["attendance"]["attendance_units"] == 0
    assert salary["gross_pay"] == 0
    assert salary["net_pay"] == 0


def test_marking_same_day_twice_overwrites(db, seed):
    mark(db, seed, date(2025, 3, 3), AttendanceStatus.PRESENT)
    record = mark(db, seed, date(2025, 3, 3), AttendanceStatus.HALF, note="left at noon")

    rows = db.query(DriverAttendance).filter_by(driver_id=seed.driver.id).all()
    assert len(rows) == 1
    assert rows[0].id == record.id
    assert rows[0].status == AttendanceStatus.HALF
    assert rows[0].note == "left at noon"


def test_list_attendance_for_month(db, seed):
    mark(db, seed, date(2025, 3, 9), AttendanceStatus.PRESENT)
    mark(db, seed, date(2025, 3, 2), AttendanceStatus.ABSENT)
    mark(db, seed, date(2025, 4, 1), AttendanceStatus.PRESENT)

    records = crud.list_attendance(db, TENANT, seed.driver.id, "2025-03")

    assert [r.attendance_date for r in records] == [date(2025, 3, 2), date(2025, 3, 9)]


@pytest.mark.parametrize("month", ["2025-13", "2025-3", "March", "", "2025/03"])
def test_malformed_month_rejected(db, seed, month):
    with pytest.raises(ValidationError):
        crud.calculate_salary(db, TENANT, seed.driver.id, month)


def test_unknown_driver(db, seed):
    with pytest.raises(NotFoundError):
        crud.calculate_salary(db, TENANT, seed.driver.id + 1, "2025-03")
    with pytest.raises(NotFoundError):
        crud.mark_attendance(db, TENANT, seed.driver.id + 1, AttendanceMark(date=date(2025, 3, 1)))
