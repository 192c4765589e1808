import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from crud import payments as crud
from database import get_db
from exceptions import AuthorizationError
from models.payments import PaymentRelatedTo, PaymentType
from schemas.payments import Payment, PaymentCreate, PaymentUpdate
from utils.auth_utils import get_user_identifier, require_permission
from utils.permissions import Capability, Role
from utils.tenancy import get_tenant_id

router = APIRouter(prefix="/payments", tags=["Payments"])
logger = logging.getLogger("payments")

can_view = require_permission(Capability.RECORD_PAYMENTS, Capability.VIEW_FINANCIALS, Capability.RECONCILE_ACCOUNTS)


@router.post("", response_model=Payment, status_code=status.HTTP_201_CREATED)
def create_payment(
    payment: PaymentCreate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user: dict = Depends(require_permission(Capability.RECORD_PAYMENTS, Capability.MAKE_PAYMENTS)),
):
    """Record a settled payment against an invoice, an expense, a collection or just a counterparty."""
    society_id = None
    if user.get("role") == Role.SOCIETY_ADMIN.value:
        if user.get("society_id") is None:
            raise AuthorizationError("Society admin token carries no society")
        society_id = int(user["society_id"])

    db_payment = crud.record_payment(db, tenant_id, payment, user_id=get_user_identifier(user), society_id=society_id)
    logger.info(f"Payment {db_payment.id} of {db_payment.amount} recorded by user {get_user_identifier(user)} for tenant {tenant_id}")
    return db_payment

@router.get("", response_model=List[Payment])
def read_payments(
    payment_type: Optional[PaymentType] = None,
    related_to: Optional[PaymentRelatedTo] = None,
    related_id: Optional[int] = None,
    invoice_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user: dict = Depends(can_view),
):
    return crud.get_payments(
        db=db,
        tenant_id=tenant_id,
        payment_type=payment_type,
        related_to=related_to,
        related_id=related_id,
        invoice_id=invoice_id,
        start_date=start_date,
        end_date=end_date,
        skip=skip,
        limit=limit,
    )

@router.get("/{payment_id}", response_model=Payment)
def read_payment(payment_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_view)):
    db_payment = crud.get_payment(db=db, payment_id=payment_id, tenant_id=tenant_id)
    if db_payment is None:
        raise HTTPException(status_code=404, detail="Payment not found")
    return db_payment

@router.patch("/{payment_id}", response_model=Payment)
def update_payment(payment_id: int, changes: PaymentUpdate, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(require_permission(Capability.RECORD_PAYMENTS))):
    """Update status, method, reference or notes. A status change re-checks the linked invoice."""
    db_payment = crud.get_payment(db=db, payment_id=payment_id, tenant_id=tenant_id)
    if db_payment is None:
        raise HTTPException(status_code=404, detail="Payment not found")
    return crud.update_payment(db, db_payment, changes, user_id=get_user_identifier(user))
