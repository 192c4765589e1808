from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from crud import expenses as crud
from database import get_db
from models.expenses import Expense as ExpenseModel
from models.expenses import ExpenseCategory, ExpenseStatus
from routers.collections import check_own_trip, own_driver_id
from schemas import expenses as schemas
from utils.auth_utils import get_user_identifier, require_permission
from utils.permissions import Capability, Role
from utils.tenancy import get_tenant_id

router = APIRouter(prefix="/expenses", tags=["Expenses"])

can_view = require_permission(Capability.APPROVE_EXPENSES, Capability.VIEW_FINANCIALS, Capability.SUBMIT_EXPENSE)


def _get_or_404(db: Session, expense_id: int, tenant_id: str) -> ExpenseModel:
    db_expense = crud.get_expense(db=db, expense_id=expense_id, tenant_id=tenant_id)
    if db_expense is None:
        raise HTTPException(status_code=404, detail="Expense not found")
    return db_expense


@router.post("", response_model=schemas.Expense, status_code=status.HTTP_201_CREATED)
def create_expense(expense: schemas.ExpenseCreate, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(require_permission(Capability.SUBMIT_EXPENSE, Capability.APPROVE_EXPENSES))):
    if user.get("role") == Role.DRIVER.value and str(user.get("driver_id")) != str(expense.driver_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Drivers can only submit their own expenses")
    return crud.create_expense(db=db, expense=expense, tenant_id=tenant_id, user_id=get_user_identifier(user))

@router.get("", response_model=List[schemas.Expense])
def read_expenses(
    driver_id: Optional[int] = None,
    status: Optional[ExpenseStatus] = None,
    category: Optional[ExpenseCategory] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user: dict = Depends(can_view),
):
    return crud.get_expenses(
        db=db,
        tenant_id=tenant_id,
        driver_id=own_driver_id(user, driver_id),
        status=status,
        category=category,
        start_date=start_date,
        end_date=end_date,
        skip=skip,
        limit=limit,
    )

@router.get("/{expense_id}", response_model=schemas.Expense)
def read_expense(expense_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_view)):
    db_expense = _get_or_404(db, expense_id, tenant_id)
    check_own_trip(user, db_expense.driver_id)
    return db_expense

@router.put("/{expense_id}/approve", response_model=schemas.Expense)
def review_expense(expense_id: int, review: schemas.ExpenseReview, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(require_permission(Capability.APPROVE_EXPENSES))):
    """Approve or reject a pending expense."""
    db_expense = _get_or_404(db, expense_id, tenant_id)
    return crud.review_expense(db, db_expense, review, user_id=get_user_identifier(user))

@router.put("/{expense_id}/charge", response_model=schemas.Expense)
def assign_expense_charge(
    expense_id: int,
    assignment: schemas.ExpenseChargeAssignment,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user: dict = Depends(require_permission(Capability.ASSIGN_EXPENSE_CHARGE, Capability.APPROVE_EXPENSES)),
):
    """Decide who bears the expense. Fuel always stays with the vendor."""
    db_expense = _get_or_404(db, expense_id, tenant_id)
    return crud.assign_charge(db, db_expense, assignment.charged_to, user_id=get_user_identifier(user))
