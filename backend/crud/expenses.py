import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from crud.drivers import get_driver
from exceptions import NotFoundError, ValidationError
from models.collections import Collection
from models.deliveries import Delivery
from models.expenses import ChargedTo, Expense, ExpenseCategory, ExpenseStatus
from schemas import expenses as schemas
from utils import to_money
from utils.dates import now_local, today_local

logger = logging.getLogger("expenses")

REVIEW_OUTCOMES = {ExpenseStatus.APPROVED, ExpenseStatus.REJECTED}


def check_charge_policy(category: ExpenseCategory, charged_to: ChargedTo):
    """Fuel is always borne by the vendor."""
    if category == ExpenseCategory.FUEL and charged_to != ChargedTo.VENDOR:
        raise ValidationError("Fuel expenses are always charged to the vendor")


def get_expense(db: Session, expense_id: int, tenant_id: str) -> Optional[Expense]:
    return db.query(Expense).filter(Expense.id == expense_id, Expense.tenant_id == tenant_id).first()

def get_expenses(
    db: Session,
    tenant_id: str,
    driver_id: Optional[int] = None,
    status: Optional[ExpenseStatus] = None,
    category: Optional[ExpenseCategory] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Expense]:
    query = db.query(Expense).filter(Expense.tenant_id == tenant_id)
    if driver_id is not None:
        query = query.filter(Expense.driver_id == driver_id)
    if status is not None:
        query = query.filter(Expense.status == status)
    if category is not None:
        query = query.filter(Expense.category == category)
    if start_date:
        query = query.filter(Expense.expense_date >= start_date)
    if end_date:
        query = query.filter(Expense.expense_date <= end_date)
    return query.order_by(Expense.expense_date.desc(), Expense.id.desc()).offset(skip).limit(limit).all()

def create_expense(db: Session, expense: schemas.ExpenseCreate, tenant_id: str, user_id: str = None) -> Expense:
    if get_driver(db, expense.driver_id, tenant_id) is None:
        raise NotFoundError(f"Driver {expense.driver_id} not found")
    for model, record_id in ((Collection, expense.collection_id), (Delivery, expense.delivery_id)):
        if record_id is not None and db.query(model).filter(model.id == record_id, model.tenant_id == tenant_id).first() is None:
            raise NotFoundError(f"{model.__name__} {record_id} not found")

    data = expense.model_dump()
    data["amount"] = to_money(expense.amount)
    data["expense_date"] = expense.expense_date or today_local()
    db_expense = Expense(
        **data,
        tenant_id=tenant_id,
        status=ExpenseStatus.PENDING,
        charged_to=ChargedTo.VENDOR,
        created_by=user_id,
    )
    db.add(db_expense)
    db.commit()
    db.refresh(db_expense)
    logger.info(f"Expense {db_expense.id} ({db_expense.category.value}, {db_expense.amount}) submitted for driver {db_expense.driver_id}")
    return db_expense

def review_expense(db: Session, db_expense: Expense, review: schemas.ExpenseReview, user_id: str = None) -> Expense:
    if review.status not in REVIEW_OUTCOMES:
        raise ValidationError("An expense can only be approved or rejected")
    if db_expense.status != ExpenseStatus.PENDING:
        raise ValidationError(f"Expense {db_expense.id} is already {db_expense.status.value}")
    if review.status == ExpenseStatus.REJECTED and not review.rejection_reason:
        raise ValidationError("A rejection reason is required")

    db_expense.status = review.status
    db_expense.approved_by = user_id
    db_expense.approved_at = now_local()
    db_expense.rejection_reason = review.rejection_reason if review.status == ExpenseStatus.REJECTED else None
    db_expense.updated_by = user_id
    db.commit()
    db.refresh(db_expense)
    logger.info(f"Expense {db_expense.id} {db_expense.status.value} by {user_id}")
    return db_expense

def assign_charge(db: Session, db_expense: Expense, charged_to: ChargedTo, user_id: str = None) -> Expense:
    check_charge_policy(db_expense.category, charged_to)
    if db_expense.status == ExpenseStatus.PAID:
        raise ValidationError(f"Expense {db_expense.id} is already paid")
    db_expense.charged_to = charged_to
    db_expense.updated_by = user_id
    db.commit()
    db.refresh(db_expense)
    logger.info(f"Expense {db_expense.id} charged to {charged_to.value}")
    return db_expense
