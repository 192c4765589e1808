from decimal import Decimal

import pytest

from crud import expenses as crud
from exceptions import NotFoundError, ValidationError
from models.expenses import ChargedTo, ExpenseCategory, ExpenseStatus
from schemas.expenses import ExpenseCreate, ExpenseReview
from conftest import TENANT


def submit(db, seed, category="toll", amount=120):
    return crud.create_expense(db, ExpenseCreate(driver_id=seed.driver.id, category=category, amount=amount), TENANT, user_id="driver@example.com")


def test_submission_starts_pending_and_vendor_charged(db, seed):
    expense = submit(db, seed)
    assert expense.status == ExpenseStatus.PENDING
    assert expense.charged_to == ChargedTo.VENDOR
    assert expense.amount == Decimal("120.00")
    assert expense.expense_date is not None


def test_fuel_cannot_be_charged_to_driver(db, seed):
    expense = submit(db, seed, category="fuel", amount=2000)
    with pytest.raises(ValidationError):
        crud.assign_charge(db, expense, ChargedTo.DRIVER)
    db.refresh(expense)
    assert expense.charged_to == ChargedTo.VENDOR


def test_non_fuel_can_be_charged_to_driver(db, seed):
    expense = submit(db, seed, category="personal")
    crud.assign_charge(db, expense, ChargedTo.DRIVER)
    assert expense.charged_to == ChargedTo.DRIVER


def test_charge_policy_is_pure():
    crud.check_charge_policy(ExpenseCategory.FUEL, ChargedTo.VENDOR)
    crud.check_charge_policy(ExpenseCategory.FOOD, ChargedTo.DRIVER)
    with pytest.raises(ValidationError):
        crud.check_charge_policy(ExpenseCategory.FUEL, ChargedTo.DRIVER)


def test_review_only_from_pending(db, seed):
    expense = submit(db, seed)
    crud.review_expense(db, expense, ExpenseReview(status="approved"), user_id="accounts@example.com")
    assert expense.status == ExpenseStatus.APPROVED
    assert expense.approved_by == "accounts@example.com"
    assert expense.approved_at is not None

    with pytest.raises(ValidationError):
        crud.review_expense(db, expense, ExpenseReview(status="rejected", rejection_reason="late"))


def test_rejection_needs_reason(db, seed):
    expense = submit(db, seed)
    with pytest.raises(ValidationError):
        crud.review_expense(db, expense, ExpenseReview(status="rejected"))
    with pytest.raises(ValidationError):
        crud.review_expense(db, expense, ExpenseReview(status="paid"))

    crud.review_expense(db, expense, ExpenseReview(status="rejected", rejection_reason="no receipt"))
    assert expense.status == ExpenseStatus.REJECTED
    assert expense.rejection_reason == "no receipt"


def test_submission_for_unknown_driver(db, seed):
    with pytest.raises(NotFoundError):
        crud.create_expense(db, ExpenseCreate(driver_id=seed.driver.id + 3, category="toll", amount=10), TENANT)
