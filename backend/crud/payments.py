import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from exceptions import AuthorizationError, NotFoundError, ValidationError
from models.collections import Collection
from models.deliveries import Delivery
from models.expenses import Expense, ExpenseStatus
from models.invoices import Invoice, InvoiceRelatedTo, InvoiceStatus
from models.payments import Payment, PaymentRelatedTo, PaymentStatus, PaymentType
from schemas import payments as schemas
from utils import to_money
from utils.dates import now_local, today_local

logger = logging.getLogger("payments")


def invoice_paid_amount(db: Session, invoice_id: int) -> Decimal:
    """Sum of completed payments against the invoice."""
    paid = (
        db.query(func.coalesce(func.sum(Payment.amount), 0))
        .filter(Payment.invoice_id == invoice_id, Payment.status == PaymentStatus.COMPLETED)
        .scalar()
    )
    return to_money(paid)

def unpaid_status(invoice: Invoice, today: Optional[date] = None) -> InvoiceStatus:
    """Status an invoice returns to when its payments stop covering it."""
    if invoice.sent_date is None:
        return InvoiceStatus.DRAFT
    today = today or today_local()
    if invoice.due_date is not None and invoice.due_date < today:
        return InvoiceStatus.OVERDUE
    return InvoiceStatus.SENT

def sync_invoice_status(db: Session, invoice: Invoice) -> Invoice:
    """Flip the invoice to paid once completed payments cover the total, or back to its unpaid status when they no longer do.

    Partial payments leave the status alone. Caller commits.
    """
    db.flush()
    paid = invoice_paid_amount(db, invoice.id)
    if paid >= invoice.total and invoice.status not in (InvoiceStatus.PAID, InvoiceStatus.CANCELLED):
        invoice.status = InvoiceStatus.PAID
        invoice.paid_date = now_local()
        logger.info(f"Invoice {invoice.invoice_number} fully paid ({paid} of {invoice.total})")
    elif paid < invoice.total and invoice.status == InvoiceStatus.PAID:
        invoice.status = unpaid_status(invoice)
        invoice.paid_date = None
        logger.warning(f"Invoice {invoice.invoice_number} no longer covered ({paid} of {invoice.total}), back to {invoice.status.value}")
    if paid > invoice.total:
        logger.warning(f"Invoice {invoice.invoice_number} overpaid by {paid - invoice.total}")
    return invoice


def _get_in_tenant(db: Session, model, record_id: int, tenant_id: str, label: str):
    record = db.query(model).filter(model.id == record_id, model.tenant_id == tenant_id).first()
    if record is None:
        raise NotFoundError(f"{label} {record_id} not found")
    return record

def record_payment(db: Session, tenant_id: str, payment: schemas.PaymentCreate, user_id: str = None,
                   society_id: Optional[int] = None) -> Payment:
    """Store a settled payment and apply it to the linked invoice, expense or record.

    ``society_id`` restricts the payment to that society's own invoices (payments made
    by a society admin).
    """
    invoice = None
    expense = None
    if payment.invoice_id is not None:
        invoice = _get_in_tenant(db, Invoice, payment.invoice_id, tenant_id, "Invoice")
    if society_id is not None:
        if invoice is None or invoice.related_to != InvoiceRelatedTo.SOCIETY or invoice.related_id != society_id:
            raise AuthorizationError("Society payments must target one of the society's own invoices")
    if invoice is not None:
        if invoice.status == InvoiceStatus.CANCELLED:
            raise ValidationError(f"Invoice {invoice.invoice_number} is cancelled")
        if invoice.related_to.value != payment.related_to.value or invoice.related_id != payment.related_id:
            raise ValidationError(
                f"Invoice {invoice.invoice_number} belongs to {invoice.related_to.value} {invoice.related_id}, "
                f"not {payment.related_to.value} {payment.related_id}"
            )
    if payment.expense_id is not None:
        expense = _get_in_tenant(db, Expense, payment.expense_id, tenant_id, "Expense")
        if expense.status == ExpenseStatus.PAID:
            raise ValidationError(f"Expense {expense.id} is already paid")
    if payment.collection_id is not None:
        collection = _get_in_tenant(db, Collection, payment.collection_id, tenant_id, "Collection")
        if payment.related_to != PaymentRelatedTo.SUPPLIER or collection.supplier_id != payment.related_id:
            raise ValidationError(f"Collection {collection.id} is not from supplier {payment.related_id}")
    if payment.delivery_id is not None:
        delivery = _get_in_tenant(db, Delivery, payment.delivery_id, tenant_id, "Delivery")
        if payment.related_to != PaymentRelatedTo.SOCIETY or delivery.society_id != payment.related_id:
            raise ValidationError(f"Delivery {delivery.id} is not for society {payment.related_id}")

    data = payment.model_dump()
    data["amount"] = to_money(payment.amount)
    data["payment_date"] = payment.payment_date or today_local()
    db_payment = Payment(**data, tenant_id=tenant_id, status=PaymentStatus.COMPLETED, created_by=user_id)

    try:
        db.add(db_payment)
        db.flush()
        if invoice is not None:
            sync_invoice_status(db, invoice)
        if expense is not None:
            expense.status = ExpenseStatus.PAID
            expense.payment_id = db_payment.id
            expense.updated_by = user_id
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(f"Recording payment failed for {payment.related_to.value} {payment.related_id} (tenant {tenant_id})")
        raise

    db.refresh(db_payment)
    logger.info(
        f"Payment {db_payment.id} of {db_payment.amount} recorded for {db_payment.related_to.value} "
        f"{db_payment.related_id} via {db_payment.payment_method.value} (tenant {tenant_id})"
    )
    return db_payment


def get_payment(db: Session, payment_id: int, tenant_id: str) -> Optional[Payment]:
    return db.query(Payment).filter(Payment.id == payment_id, Payment.tenant_id == tenant_id).first()

def get_payments(
    db: Session,
    tenant_id: str,
    payment_type: Optional[PaymentType] = None,
    related_to=None,
    related_id: Optional[int] = None,
    invoice_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Payment]:
    query = db.query(Payment).filter(Payment.tenant_id == tenant_id)
    if payment_type is not None:
        query = query.filter(Payment.payment_type == payment_type)
    if related_to is not None:
        query = query.filter(Payment.related_to == related_to)
    if related_id is not None:
        query = query.filter(Payment.related_id == related_id)
    if invoice_id is not None:
        query = query.filter(Payment.invoice_id == invoice_id)
    if start_date:
        query = query.filter(Payment.payment_date >= start_date)
    if end_date:
        query = query.filter(Payment.payment_date <= end_date)
    return query.order_by(Payment.payment_date.desc(), Payment.id.desc()).offset(skip).limit(limit).all()

def update_payment(db: Session, db_payment: Payment, changes: schemas.PaymentUpdate, user_id: str = None) -> Payment:
    """Change status, method, reference or notes; a status change re-evaluates the linked invoice."""
    values = changes.model_dump(exclude_unset=True)
    if "status" in values and values["status"] is None:
        raise ValidationError("status cannot be empty")
    old_status = db_payment.status
    for key, value in values.items():
        if key == "payment_method" and value is None:
            continue
        setattr(db_payment, key, value)
    db_payment.updated_by = user_id
    if db_payment.invoice is not None and db_payment.status != old_status:
        sync_invoice_status(db, db_payment.invoice)
    db.commit()
    db.refresh(db_payment)
    if db_payment.status != old_status:
        logger.info(f"Payment {db_payment.id} moved from {old_status.value} to {db_payment.status.value}")
    return db_payment
