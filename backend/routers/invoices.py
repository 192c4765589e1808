import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from crud import invoices as crud
from database import get_db
from models.invoices import Invoice as InvoiceModel
from models.invoices import InvoiceRelatedTo, InvoiceStatus, InvoiceType
from schemas import invoices as schemas
from utils.auth_utils import get_user_identifier, require_permission
from utils.permissions import Capability, Role
from utils.tenancy import get_tenant_id

router = APIRouter(prefix="/invoices", tags=["Invoices"])
logger = logging.getLogger("invoices")

can_generate = require_permission(Capability.GENERATE_INVOICES)
can_manage = require_permission(Capability.MANAGE_INVOICES)
can_view = require_permission(Capability.MANAGE_INVOICES, Capability.VIEW_FINANCIALS, Capability.VIEW_OWN_INVOICES)


def _get_or_404(db: Session, invoice_id: int, tenant_id: str) -> InvoiceModel:
    db_invoice = crud.get_invoice(db=db, invoice_id=invoice_id, tenant_id=tenant_id)
    if db_invoice is None:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return db_invoice

def _is_society_admin(user: dict) -> bool:
    return user.get("role") == Role.SOCIETY_ADMIN.value


@router.post("/generate-monthly", response_model=schemas.Invoice, status_code=status.HTTP_201_CREATED)
def generate_monthly_invoice(request: schemas.InvoiceGenerateRequest, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_generate)):
    """Bundle a supplier's or society's completed, uninvoiced records between two dates into a draft invoice."""
    invoice = crud.generate_invoice(
        db,
        tenant_id,
        related_to=request.related_to,
        related_id=request.related_id,
        start_date=request.start_date,
        end_date=request.end_date,
        user_id=get_user_identifier(user),
    )
    logger.info(f"Invoice {invoice.invoice_number} generated by {get_user_identifier(user)} for tenant {tenant_id}")
    return invoice

@router.post("/mark-overdue", response_model=schemas.OverdueSweepResult)
def mark_overdue(db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_manage)):
    return {"marked_overdue": crud.mark_overdue_invoices(db=db, tenant_id=tenant_id)}

@router.get("", response_model=List[schemas.Invoice])
def read_invoices(
    invoice_type: Optional[InvoiceType] = None,
    related_to: Optional[InvoiceRelatedTo] = None,
    related_id: Optional[int] = None,
    status: Optional[InvoiceStatus] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
    user: dict = Depends(can_view),
):
    if _is_society_admin(user):
        if user.get("society_id") is None:
            return []
        related_to, related_id = InvoiceRelatedTo.SOCIETY, int(user["society_id"])
    return crud.get_invoices(
        db=db,
        tenant_id=tenant_id,
        invoice_type=invoice_type,
        related_to=related_to,
        related_id=related_id,
        status=status,
        start_date=start_date,
        end_date=end_date,
        skip=skip,
        limit=limit,
    )

@router.get("/{invoice_id}", response_model=schemas.Invoice)
def read_invoice(invoice_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_view)):
    db_invoice = _get_or_404(db, invoice_id, tenant_id)
    if _is_society_admin(user) and (
        db_invoice.related_to != InvoiceRelatedTo.SOCIETY or str(db_invoice.related_id) != str(user.get("society_id"))
    ):
        raise HTTPException(status_code=404, detail="Invoice not found")
    return db_invoice

@router.patch("/{invoice_id}", response_model=schemas.Invoice)
def update_invoice(invoice_id: int, changes: schemas.InvoiceUpdate, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_manage)):
    """Set tax, discount, due date or notes; the total is re-derived from the fixed subtotal."""
    db_invoice = _get_or_404(db, invoice_id, tenant_id)
    return crud.update_invoice(db, db_invoice, changes, user_id=get_user_identifier(user))

@router.put("/{invoice_id}/send", response_model=schemas.Invoice)
def send_invoice(invoice_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_manage)):
    db_invoice = _get_or_404(db, invoice_id, tenant_id)
    return crud.send_invoice(db, db_invoice, user_id=get_user_identifier(user))

@router.put("/{invoice_id}/cancel", response_model=schemas.Invoice)
def cancel_invoice(invoice_id: int, db: Session = Depends(get_db), tenant_id: str = Depends(get_tenant_id), user: dict = Depends(can_manage)):
    db_invoice = _get_or_404(db, invoice_id, tenant_id)
    invoice = crud.cancel_invoice(db, db_invoice, user_id=get_user_identifier(user))
    logger.info(f"Invoice {invoice.invoice_number} cancelled by {get_user_identifier(user)} for tenant {tenant_id}")
    return invoice
