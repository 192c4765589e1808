from datetime import date, datetime
from typing import Optional

from pydantic import Field

from models.expenses import ChargedTo, ExpenseCategory, ExpenseStatus
from schemas.common import CamelModel, Money


class ExpenseCreate(CamelModel):
    driver_id: int
    category: ExpenseCategory
    amount: Money = Field(ge=0)
    description: Optional[str] = None
    collection_id: Optional[int] = None
    delivery_id: Optional[int] = None
    expense_date: Optional[date] = None

class ExpenseReview(CamelModel):
    status: ExpenseStatus
    rejection_reason: Optional[str] = None

class ExpenseChargeAssignment(CamelModel):
    charged_to: ChargedTo

class Expense(CamelModel):
    id: int
    tenant_id: str
    driver_id: int
    collection_id: Optional[int] = None
    delivery_id: Optional[int] = None
    category: ExpenseCategory
    amount: Money
    description: Optional[str] = None
    status: ExpenseStatus
    charged_to: ChargedTo
    approved_by: Optional[str] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    payment_id: Optional[int] = None
    expense_date: date
    created_at: datetime
    updated_at: Optional[datetime] = None
